"""Pure text processing for require() calls - no file I/O."""

from __future__ import annotations

import re
from re import Pattern

from .bundle_item import BundleItem

REQUIRE_PATTERN: Pattern = re.compile(r"(?<![\w$.])require\s*\(")

# require("name") / require('name') with a string literal argument
REQUIRE_CALL_PATTERN: Pattern = re.compile(r"""(?<![\w$.])require\s*\(\s*(["'])([^"'\n]+)\1\s*\)""")

# Block comments, and line comments not preceded by ':' (keeps URLs in strings)
COMMENT_PATTERN: Pattern = re.compile(r"/\*.*?\*/|(?<![:\\])//[^\n]*", re.DOTALL)


def strip_comments(source: str) -> str:
    """Remove block and line comments.

    Examples:
        >>> strip_comments("a(); // require('x')")
        'a(); '
    """
    return COMMENT_PATTERN.sub("", source)


def find_requires(source: str) -> list[str]:
    """Ordered, de-duplicated module names passed to require().

    Examples:
        >>> find_requires("var a = require('./a'); var b = require(\\"b\\"); require('./a');")
        ['./a', 'b']
        >>> find_requires("require(name)")
        []
    """
    names: list[str] = []
    for match in REQUIRE_CALL_PATTERN.finditer(strip_comments(source)):
        name = match.group(2)
        if name not in names:
            names.append(name)
    return names


class DependencyWalker:
    """Finds the modules a script requires."""

    def has_require(self, source: str | None) -> bool:
        """Check if source contains a require( call."""
        return bool(source) and bool(REQUIRE_PATTERN.search(source))

    async def collect_javascript_dependencies(self, item: BundleItem) -> list[str]:
        """Module names required by item.source, in order of first appearance."""
        return find_requires(item.source or "")
