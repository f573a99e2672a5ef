"""Per-run resolution state shared by every resolve_module call."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from dataclasses import field


@dataclass
class ResolutionSession:
    """Caches for a single bundling run.

    Attributes:
        shims: Built-in module name to shim file, None when shimming is off
        package_map: Bower package name to entry file
        filename_cache: Files already read and walked (or skipped as typed source)
        lookup_name_cache: Lookup name to resolved filename
        pending: Filename resolutions in flight, keyed by lookup name
        resolutions: Number of times the filename resolution chain ran
        reads: Number of source reads
    """

    shims: dict[str, str] | None = None
    package_map: dict[str, str] = field(default_factory=dict)
    filename_cache: set[str] = field(default_factory=set)
    lookup_name_cache: dict[str, str] = field(default_factory=dict)
    pending: dict[str, asyncio.Task[str]] = field(default_factory=dict)
    resolutions: int = 0
    reads: int = 0

    def cached_filename(self, lookup_name: str) -> str | None:
        return self.lookup_name_cache.get(lookup_name)

    def is_visited(self, filename: str) -> bool:
        return filename in self.filename_cache

    def mark_visited(self, filename: str) -> None:
        self.filename_cache.add(filename)
