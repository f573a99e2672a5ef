"""Exception types raised while resolving a bundle.

Only ResolutionFailure escapes the resolver. PackageManagerUnavailable and
CandidateStatFailure are raised and recovered inside package_map.
"""

from __future__ import annotations

import json
import os
from typing import Any


class BundleResolverError(Exception):
    """Base class for bundle resolver errors."""


class ConfigurationError(BundleResolverError):
    """Configuration file is missing or invalid."""


class ResolutionFailure(BundleResolverError):
    """A module could not be resolved to a file. Aborts the whole run."""

    def __init__(
        self,
        module_name: str,
        requiring_module: str,
        options: dict[str, Any],
        cause: BaseException | None = None,
    ):
        self.module_name = module_name
        self.requiring_module = requiring_module
        self.options = options
        self.cause = cause
        message = (
            f"Unable to resolve module [{module_name}] from [{requiring_module}]"
            + os.linesep
            + json.dumps(options, indent=2, default=str)
        )
        if cause is not None:
            message += os.linesep + str(cause)
        super().__init__(message)


class PackageManagerUnavailable(BundleResolverError):
    """The secondary package manager could not list installed packages."""


class CandidateStatFailure(BundleResolverError):
    """A guessed package entry file does not exist on disk."""

    def __init__(self, candidate: str):
        self.candidate = candidate
        super().__init__(f"Package entry candidate not found: {candidate}")
