"""Tests for the built-in shim table."""

import pytest

from bundle_resolver.shims import NODE_BUILTIN_SHIMS
from bundle_resolver.shims import load_shims
from bundle_resolver.shims import load_shims_async


def test_only_installed_shims_are_loaded(project, write_files):
    write_files(
        project,
        {
            "node_modules/path-browserify/package.json": {"main": "index.js"},
            "node_modules/path-browserify/index.js": "",
            "node_modules/process/browser.js": "",
        },
    )

    shims = load_shims(str(project), ["node_modules"], [".js"])

    assert shims == {
        "path": str(project / "node_modules" / "path-browserify" / "index.js"),
        "process": str(project / "node_modules" / "process" / "browser.js"),
    }


def test_custom_table(project, write_files):
    write_files(project, {"node_modules/empty/index.js": ""})

    shims = load_shims(str(project), ["node_modules"], [".js"], table={"fs": "empty"})

    assert shims == {"fs": str(project / "node_modules" / "empty" / "index.js")}


def test_table_covers_common_builtins():
    for builtin in ("buffer", "events", "path", "process", "util"):
        assert builtin in NODE_BUILTIN_SHIMS


@pytest.mark.asyncio
async def test_load_shims_async_empty_project(project):
    assert await load_shims_async(str(project), ["node_modules"], [".js"]) == {}
