"""Tests for the bower package map."""

import json
import os
from unittest.mock import AsyncMock
from unittest.mock import patch

import pytest

from bundle_resolver.errors import PackageManagerUnavailable
from bundle_resolver.package_map import BowerLister
from bundle_resolver.package_map import build_package_map
from bundle_resolver.package_map import entry_candidates


def test_entry_candidates_order():
    package = {"canonicalDir": "/bower/jq", "pkgMeta": {"main": ["dist/jq.js", "dist/jq.css"]}}
    assert entry_candidates("jq", package) == [
        os.path.normpath("/bower/jq/index.js"),
        os.path.normpath("/bower/jq/jq.js"),
        os.path.normpath("/bower/jq/dist/jq.js"),
        os.path.normpath("/bower/jq/dist/jq.css"),
    ]


def test_entry_candidates_without_canonical_dir():
    assert entry_candidates("jq", {"pkgMeta": {"main": "jq.js"}}) == []


@pytest.mark.asyncio
async def test_declared_main_beats_guesses(project, write_files, static_lister):
    write_files(project, {"bower/jq/index.js": "", "bower/jq/dist/jq.js": ""})
    lister = static_lister(
        {"jq": {"canonicalDir": str(project / "bower" / "jq"), "pkgMeta": {"main": "dist/jq.js"}}}
    )

    package_map = await build_package_map(lister)

    assert package_map == {"jq": str(project / "bower" / "jq" / "dist" / "jq.js")}


@pytest.mark.asyncio
async def test_missing_candidates_are_skipped(project, write_files, static_lister):
    write_files(project, {"bower/moment/moment.js": ""})
    lister = static_lister(
        {
            "moment": {"canonicalDir": str(project / "bower" / "moment"), "pkgMeta": {"main": "missing.js"}},
            "ghost": {"canonicalDir": str(project / "bower" / "ghost"), "pkgMeta": {}},
        }
    )

    package_map = await build_package_map(lister)

    assert package_map == {"moment": str(project / "bower" / "moment" / "moment.js")}


@pytest.mark.asyncio
async def test_unavailable_package_manager_yields_empty_map():
    lister = AsyncMock()
    lister.list_packages.side_effect = PackageManagerUnavailable("bower is not available")

    assert await build_package_map(lister) == {}


class TestBowerLister:
    @pytest.mark.asyncio
    async def test_missing_executable(self, tmp_path):
        lister = BowerLister(cwd=str(tmp_path), executable="definitely-not-bower-xyz")
        with pytest.raises(PackageManagerUnavailable, match="not available"):
            await lister.list_packages()

    @pytest.mark.asyncio
    async def test_parses_dependencies(self):
        listing = {"dependencies": {"jq": {"canonicalDir": "/b/jq"}}}
        process = AsyncMock()
        process.returncode = 0
        process.communicate.return_value = (json.dumps(listing).encode(), b"")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as create:
            packages = await BowerLister(cwd="/p").list_packages()

        assert packages == {"jq": {"canonicalDir": "/b/jq"}}
        assert create.call_args.args[:4] == ("bower", "list", "--json", "--offline")

    @pytest.mark.asyncio
    async def test_non_zero_exit(self):
        process = AsyncMock()
        process.returncode = 1
        process.communicate.return_value = (b"", b"bower ENOENT")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(PackageManagerUnavailable, match="exited with 1"):
                await BowerLister().list_packages()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        process = AsyncMock()
        process.returncode = 0
        process.communicate.return_value = (b"not json", b"")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(PackageManagerUnavailable, match="invalid JSON"):
                await BowerLister().list_packages()
