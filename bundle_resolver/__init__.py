"""Module dependency resolution for source bundlers.

Resolves entry modules to files, follows their require() calls recursively,
and produces a flat, de-duplicated list of bundle items.
"""

from .bundle_item import BundleItem
from .config import BundlerOptions
from .config import Configuration
from .config import ResolveOptions
from .config import load_configuration
from .driver import Bundler
from .driver import ResolutionResult
from .errors import ResolutionFailure
from .resolver import Resolver
from .session import ResolutionSession

__all__ = [
    "BundleItem",
    "BundlerOptions",
    "Bundler",
    "Configuration",
    "ResolutionFailure",
    "ResolutionResult",
    "ResolutionSession",
    "ResolveOptions",
    "Resolver",
    "load_configuration",
]
