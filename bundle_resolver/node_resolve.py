"""Node-style module resolution for browser bundles.

Resolution order for a module name:
1. Shim table (`modules`): built-in name mapped straight to a file
2. Path references (./x, ../x, /x): file, then directory
3. Bare names: <ancestor>/<module directory>/<name> for every ancestor of the
   base directory, file then directory

A file candidate is tried as-is and then with each extension. A directory is
tried through package.json `browser` (string form) and `main`, then `index`.
Candidates inside a package can be rewritten by the path filter and by the
package's `browser` object map.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Callable
from collections.abc import Sequence
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js",)
DEFAULT_MODULE_DIRECTORIES = ("node_modules",)

CORE_MODULES = frozenset(
    {
        "assert",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "https",
        "module",
        "net",
        "os",
        "path",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "worker_threads",
        "zlib",
    }
)

# (package.json contents, candidate path, candidate relative to package dir) -> replacement or None
PathFilter = Callable[[dict[str, Any] | None, str, str], str | None]


class ResolveError(Exception):
    """No file could be found for a module name."""

    def __init__(self, message: str, tried: Sequence[str] = ()):
        self.tried = list(tried)
        super().__init__(message)


def is_core_module(name: str) -> bool:
    return name.startswith("node:") or name in CORE_MODULES


def is_path_reference(name: str) -> bool:
    """True for ./x, ../x, ., .. and absolute paths."""
    return (
        name in (".", "..")
        or name.startswith("./")
        or name.startswith("../")
        or os.path.isabs(name)
    )


class _NodeResolution:
    """State for resolving a single module name."""

    def __init__(
        self,
        extensions: Sequence[str],
        module_directories: Sequence[str],
        path_filter: PathFilter | None,
    ):
        self.extensions = list(extensions)
        self.module_directories = list(module_directories)
        self.path_filter = path_filter
        self.tried: list[str] = []
        self._packages: dict[str, dict[str, Any] | None] = {}

    def load(self, target: str) -> str | None:
        return self.load_as_file(target) or self.load_as_directory(target)

    def load_as_file(self, target: str) -> str | None:
        package = self.find_package(os.path.dirname(target))
        if package is not None:
            package_dir, pkg = package
            if self.path_filter is not None:
                relative = os.path.relpath(target, package_dir)
                filtered = self.path_filter(pkg, target, relative)
                if filtered:
                    target = os.path.normpath(os.path.join(package_dir, filtered))

        for candidate in [target] + [target + ext for ext in self.extensions]:
            if package is not None:
                mapped = self._browser_mapping(package, candidate)
                if mapped is False:
                    continue
                if mapped:
                    candidate = mapped
            self.tried.append(candidate)
            if os.path.isfile(candidate):
                return candidate
        return None

    def load_as_directory(self, target: str) -> str | None:
        pkg = self.read_package(target)
        if pkg:
            for field in ("browser", "main"):
                entry = pkg.get(field)
                if isinstance(entry, str) and entry:
                    entry_path = os.path.normpath(os.path.join(target, entry))
                    found = self.load_as_file(entry_path) or self.load_as_file(os.path.join(entry_path, "index"))
                    if found:
                        return found
        return self.load_as_file(os.path.join(target, "index"))

    def read_package(self, directory: str) -> dict[str, Any] | None:
        if directory in self._packages:
            return self._packages[directory]

        pkg = None
        package_json = os.path.join(directory, "package.json")
        if os.path.isfile(package_json):
            try:
                with open(package_json, encoding="utf-8") as f:
                    pkg = json.load(f)
            except (OSError, ValueError) as e:
                logger.debug(f"Ignoring unreadable {package_json}: {e}")
            if not isinstance(pkg, dict):
                pkg = None

        self._packages[directory] = pkg
        return pkg

    def find_package(self, directory: str) -> tuple[str, dict[str, Any]] | None:
        """Nearest enclosing package, not crossing a module directory."""
        current = directory
        while True:
            if os.path.basename(current) in self.module_directories:
                return None
            pkg = self.read_package(current)
            if pkg is not None:
                return current, pkg
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent

    def _browser_mapping(self, package: tuple[str, dict[str, Any]], candidate: str) -> str | bool | None:
        package_dir, pkg = package
        browser = pkg.get("browser")
        if not isinstance(browser, dict):
            return None
        for key, value in browser.items():
            if not is_path_reference(key):
                continue
            if os.path.normpath(os.path.join(package_dir, key)) != candidate:
                continue
            if value is False:
                return False
            if isinstance(value, str):
                return os.path.normpath(os.path.join(package_dir, value))
        return None


def module_paths(basedir: str, module_directories: Sequence[str]) -> list[str]:
    """Directories searched for a bare module name, nearest first."""
    paths = []
    current = basedir
    while True:
        for directory in module_directories:
            if os.path.isabs(directory) or os.path.basename(current) == directory:
                continue
            paths.append(os.path.join(current, directory))
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    paths.extend(directory for directory in module_directories if os.path.isabs(directory))
    return paths


def resolve(
    name: str,
    *,
    filename: str | None = None,
    basedir: str | None = None,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    module_directories: Sequence[str] = DEFAULT_MODULE_DIRECTORIES,
    modules: dict[str, str] | None = None,
    path_filter: PathFilter | None = None,
) -> str:
    """Resolve a module name to an absolute filename.

    Args:
        name: Module name as written in the requiring file
        filename: Requiring file; its directory is the base directory
        basedir: Base directory when no filename is given (default: CWD)
        extensions: Extensions tried after the exact name
        module_directories: Directory names searched for bare names
        modules: Shim table, consulted before anything else
        path_filter: Rewrites file candidates that live inside a package

    Returns:
        Absolute path of the resolved file

    Raises:
        ResolveError: Nothing matched
    """
    if modules and name in modules:
        return modules[name]

    if filename:
        basedir = os.path.dirname(os.path.abspath(filename))
    basedir = os.path.abspath(basedir or os.getcwd())

    resolution = _NodeResolution(extensions, module_directories, path_filter)

    if is_path_reference(name):
        found = resolution.load(os.path.normpath(os.path.join(basedir, name)))
        if found:
            return os.path.abspath(found)
    elif is_core_module(name):
        raise ResolveError(f"Cannot find module '{name}': Node built-in with no shim")
    else:
        for directory in module_paths(basedir, resolution.module_directories):
            found = resolution.load(os.path.join(directory, name))
            if found:
                return os.path.abspath(found)

    raise ResolveError(f"Cannot find module '{name}' from '{basedir}'", resolution.tried)


async def resolve_async(name: str, **options: Any) -> str:
    """Run resolve() in a worker thread."""
    return await asyncio.to_thread(resolve, name, **options)
