"""BundleItem: one node of the dependency graph being built."""

from __future__ import annotations

import ntpath
import re
from dataclasses import dataclass
from dataclasses import field

SCRIPT_PATTERN = re.compile(r"\.(js|jsx|mjs|cjs|ts|tsx)$")
TYPESCRIPT_PATTERN = re.compile(r"\.(ts|tsx)$")
TYPINGS_PATTERN = re.compile(r"\.d\.ts$")


@dataclass
class BundleItem:
    """A module reference and everything learned about it during resolution.

    Attributes:
        module_name: Reference as written by the requiring file
        lookup_name: Canonical cache key, set by the resolver
        filename: Absolute resolved path, None until resolved (or if excluded)
        source: File content, set when the file is read
        dependencies: Children that resolved to a filename
    """

    module_name: str
    filename: str | None = None
    source: str | None = None
    dependencies: list[BundleItem] = field(default_factory=list)
    lookup_name: str | None = None

    def is_npm_module(self) -> bool:
        """True for package-style references (resolved via search paths)."""
        return not (
            self.module_name.startswith(".")
            or self.module_name.startswith("/")
            or ntpath.isabs(self.module_name)
        )

    def is_script(self) -> bool:
        return bool(self.filename and SCRIPT_PATTERN.search(self.filename))

    def is_typings_file(self) -> bool:
        return bool(self.filename and TYPINGS_PATTERN.search(self.filename))

    def is_typescript_file(self) -> bool:
        """Typed source: filename is resolved here, dependencies are extracted downstream."""
        return bool(self.filename and TYPESCRIPT_PATTERN.search(self.filename) and not self.is_typings_file())

    def is_json(self) -> bool:
        return bool(self.filename and self.filename.endswith(".json"))

    def __repr__(self) -> str:
        return f"BundleItem({self.module_name!r} -> {self.filename!r}, deps={len(self.dependencies)})"
