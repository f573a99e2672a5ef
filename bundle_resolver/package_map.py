"""Bower package map: bower package name -> best-guess entry file.

Built once per run, best effort. Bower not being installed, or failing, leaves
the map empty and resolution falls through to aliases and Node resolution.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any
from typing import Protocol

from .errors import CandidateStatFailure
from .errors import PackageManagerUnavailable

logger = logging.getLogger(__name__)


class PackageLister(Protocol):
    """Lists installed secondary-package-manager packages."""

    async def list_packages(self) -> dict[str, Any]:
        """Return package name -> metadata (canonicalDir, pkgMeta)."""
        ...


class BowerLister:
    """Lists bower packages with `bower list --json --offline`."""

    def __init__(self, cwd: str | None = None, executable: str = "bower"):
        self.cwd = cwd
        self.executable = executable

    async def list_packages(self) -> dict[str, Any]:
        """Run bower and return its `dependencies` mapping.

        Raises:
            PackageManagerUnavailable: bower missing, failing, or printing garbage
        """
        cmd = [self.executable, "list", "--json", "--offline"]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=self.cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            raise PackageManagerUnavailable(f"{self.executable} is not available: {e}") from e

        if process.returncode != 0:
            raise PackageManagerUnavailable(
                f"{self.executable} list exited with {process.returncode}: {stderr.decode(errors='replace').strip()}"
            )

        try:
            listing = json.loads(stdout)
        except ValueError as e:
            raise PackageManagerUnavailable(f"{self.executable} list returned invalid JSON: {e}") from e

        dependencies = listing.get("dependencies") if isinstance(listing, dict) else None
        return dependencies if isinstance(dependencies, dict) else {}

    def __repr__(self) -> str:
        return f"BowerLister({self.executable}, cwd={self.cwd})"


def entry_candidates(module_name: str, package: dict[str, Any]) -> list[str]:
    """Guessed entry files for a package, lowest priority first."""
    canonical_dir = package.get("canonicalDir")
    if not canonical_dir:
        return []

    files = ["index.js", f"{module_name}.js"]
    main = (package.get("pkgMeta") or {}).get("main")
    if isinstance(main, list):
        files.extend(entry for entry in main if isinstance(entry, str))
    elif isinstance(main, str):
        files.append(main)

    return [os.path.normpath(os.path.join(canonical_dir, file)) for file in files]


def _stat_candidate(candidate: str) -> str:
    if not os.path.isfile(candidate):
        raise CandidateStatFailure(candidate)
    return candidate


async def build_package_map(lister: PackageLister) -> dict[str, str]:
    """Build the package map from a lister's output.

    Every candidate is checked on disk; among those that exist the last in
    candidate order wins, so a declared `main` beats the index.js guess.

    Returns:
        Package name -> absolute entry file (possibly empty)
    """
    try:
        packages = await lister.list_packages()
    except PackageManagerUnavailable as e:
        logger.debug(f"Skipping bower packages: {e}")
        return {}

    package_map: dict[str, str] = {}
    for module_name, package in packages.items():
        if not isinstance(package, dict):
            continue
        for candidate in entry_candidates(module_name, package):
            try:
                package_map[module_name] = await asyncio.to_thread(_stat_candidate, candidate)
            except CandidateStatFailure as e:
                logger.debug(str(e))

    logger.debug(f"Cached {len(package_map)} bower packages")
    return package_map
