"""Browser implementations of Node built-in modules.

Each built-in maps to the npm package (or package file) that implements it in
the browser. Only packages actually installed in the project end up in the shim
table.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from . import node_resolve

logger = logging.getLogger(__name__)

NODE_BUILTIN_SHIMS: dict[str, str] = {
    "assert": "assert/",
    "buffer": "buffer/",
    "console": "console-browserify",
    "constants": "constants-browserify",
    "crypto": "crypto-browserify",
    "domain": "domain-browser",
    "events": "events/",
    "http": "stream-http",
    "https": "https-browserify",
    "os": "os-browserify/browser.js",
    "path": "path-browserify",
    "process": "process/browser.js",
    "punycode": "punycode/",
    "querystring": "querystring-es3/",
    "stream": "stream-browserify",
    "string_decoder": "string_decoder/",
    "sys": "util/util.js",
    "timers": "timers-browserify",
    "tty": "tty-browserify",
    "url": "url/",
    "util": "util/util.js",
    "vm": "vm-browserify",
    "zlib": "browserify-zlib",
}


def load_shims(
    base_path: str,
    directories: Sequence[str],
    extensions: Sequence[str],
    table: dict[str, str] | None = None,
) -> dict[str, str]:
    """Resolve the shim table against the project's installed packages.

    Args:
        base_path: Project base directory, search starts here
        directories: Module directory names
        extensions: File extensions
        table: Built-in name to shim package (default: NODE_BUILTIN_SHIMS)

    Returns:
        Built-in name to absolute shim file, for installed shims only
    """
    shims: dict[str, str] = {}
    for builtin, package in (table or NODE_BUILTIN_SHIMS).items():
        try:
            shims[builtin] = node_resolve.resolve(
                package,
                basedir=base_path,
                extensions=extensions,
                module_directories=directories,
            )
        except node_resolve.ResolveError:
            logger.debug(f"No shim installed for '{builtin}' ({package})")
    logger.debug(f"Loaded {len(shims)} built-in shims")
    return shims


async def load_shims_async(
    base_path: str,
    directories: Sequence[str],
    extensions: Sequence[str],
    table: dict[str, str] | None = None,
) -> dict[str, str]:
    return await asyncio.to_thread(load_shims, base_path, directories, extensions, table)
