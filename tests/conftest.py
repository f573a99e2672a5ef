"""Pytest configuration for bundle-resolver tests."""

import json
import sys
from pathlib import Path

import pytest

# Make the bundle_resolver package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from bundle_resolver.config import BundlerOptions
from bundle_resolver.config import Configuration
from bundle_resolver.config import ResolveOptions


class EmptyLister:
    """Package lister for a project without bower packages."""

    async def list_packages(self) -> dict:
        return {}


class StaticLister:
    """Package lister returning a fixed bower listing."""

    def __init__(self, packages: dict):
        self.packages = packages

    async def list_packages(self) -> dict:
        return self.packages


def _write_files(root: Path, files: dict[str, str | dict]) -> None:
    """Write a tree of files; dict values are written as JSON."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        path.write_text(content)


@pytest.fixture
def empty_lister():
    return EmptyLister()


@pytest.fixture
def static_lister():
    """Factory for listers returning a fixed bower listing."""
    return StaticLister


@pytest.fixture
def write_files():
    """Helper writing {relative path: content} under a root directory."""
    return _write_files


@pytest.fixture
def project(tmp_path):
    """Empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def make_config(project):
    """Build a Configuration rooted at the project directory."""

    def _make(**options) -> Configuration:
        resolve_options = ResolveOptions(
            alias=options.pop("alias", {}),
            extensions=options.pop("extensions", [".js", ".json", ".ts", ".tsx"]),
            directories=options.pop("directories", ["node_modules"]),
        )
        bundler_options = BundlerOptions(
            add_node_globals=options.pop("add_node_globals", False),
            exclude=options.pop("exclude", []),
            resolve=resolve_options,
        )
        return Configuration(base_path=project, bundler_options=bundler_options)

    return _make
