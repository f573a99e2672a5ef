"""Module resolution engine.

Resolves each module reference to a filename, reads and walks every newly
visited script, and collects the walked items into a shared buffer.

Filename resolution order (first match wins):
1. Bower package map
2. Configured alias (exact module name)
3. Node-style resolution with shims and the alias path filter

Two caches keep each lookup name resolved once and each file read once, which
also breaks circular requires.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from collections.abc import Awaitable
from typing import Any
from typing import Protocol

from . import node_resolve
from .bundle_item import BundleItem
from .config import BundlerOptions
from .config import Configuration
from .dependency_walker import DependencyWalker
from .errors import ResolutionFailure
from .package_map import BowerLister
from .package_map import PackageLister
from .package_map import build_package_map
from .session import ResolutionSession
from .shims import load_shims_async
from .source_reader import SourceReader

logger = logging.getLogger(__name__)


class SourceReaderProtocol(Protocol):
    def read(self, item: BundleItem) -> Awaitable[None]: ...


class DependencyWalkerProtocol(Protocol):
    def has_require(self, source: str | None) -> bool: ...

    def collect_javascript_dependencies(self, item: BundleItem) -> Awaitable[list[str]]: ...


def first_resolution_failure(group: BaseExceptionGroup) -> ResolutionFailure | None:
    """First ResolutionFailure in a (possibly nested) exception group."""
    for exc in group.exceptions:
        if isinstance(exc, ResolutionFailure):
            return exc
        if isinstance(exc, BaseExceptionGroup):
            found = first_resolution_failure(exc)
            if found is not None:
                return found
    return None


class Resolver:
    """Resolves bundle items and walks their dependencies for one run."""

    def __init__(
        self,
        config: Configuration,
        dependency_walker: DependencyWalkerProtocol | None = None,
        source_reader: SourceReaderProtocol | None = None,
        package_lister: PackageLister | None = None,
        session: ResolutionSession | None = None,
    ):
        self.config = config
        self.dependency_walker = dependency_walker or DependencyWalker()
        self.source_reader = source_reader or SourceReader()
        self.package_lister = package_lister or BowerLister(cwd=config.base_dir)
        self.session = session or ResolutionSession()
        self._package_map_task: asyncio.Task[dict[str, str]] | None = None

    @property
    def options(self) -> BundlerOptions:
        return self.config.bundler_options

    async def initialize(self) -> None:
        """Load shims and start caching bower packages in the background."""
        if self.options.add_node_globals:
            self.session.shims = await load_shims_async(
                self.config.base_dir,
                self.options.resolve.directories,
                self.options.resolve.extensions,
            )
        else:
            self.session.shims = None
        logger.debug(f"Shims: {self.session.shims}")

        self._package_map_task = asyncio.create_task(self._cache_bower_packages())

    async def wait_until_ready(self) -> None:
        """Wait for the bower package map to finish building."""
        if self._package_map_task is not None:
            await self._package_map_task

    async def _cache_bower_packages(self) -> dict[str, str]:
        package_map = await build_package_map(self.package_lister)
        self.session.package_map.update(package_map)
        return package_map

    async def resolve_module(
        self,
        requiring_module: str,
        item: BundleItem,
        buffer: list[BundleItem],
    ) -> BundleItem:
        """Resolve item, walk its dependencies if newly visited, and return it.

        The item comes back with filename unset when the module is excluded.
        Always suspends at least once before returning.

        Raises:
            ResolutionFailure: Item or one of its dependencies cannot be resolved
        """
        item.lookup_name = self.lookup_name(requiring_module, item)

        cached = self.session.cached_filename(item.lookup_name)
        if cached is not None:
            item.filename = cached
            await asyncio.sleep(0)
            return item

        if item.module_name in self.options.exclude:
            logger.debug(f"Excluding module {item.module_name} from {requiring_module}")
            await asyncio.sleep(0)
            return item

        item.filename = await self._resolve_filename_once(requiring_module, item)

        if self.session.is_visited(item.filename) or item.is_typescript_file():
            await asyncio.sleep(0)
            return item

        self.session.mark_visited(item.filename)
        self.session.reads += 1
        await self.source_reader.read(item)
        await self._resolve_dependencies(item, buffer)
        buffer.append(item)
        return item

    def lookup_name(self, requiring_module: str, item: BundleItem) -> str:
        if item.is_npm_module():
            return item.module_name
        return os.path.normpath(os.path.join(os.path.dirname(requiring_module), item.module_name))

    async def _resolve_filename_once(self, requiring_module: str, item: BundleItem) -> str:
        """Resolve a filename, sharing the work with concurrent requests for the same lookup name."""
        assert item.lookup_name is not None
        task = self.session.pending.get(item.lookup_name)
        if task is None:
            task = asyncio.create_task(self.resolve_filename(requiring_module, item))
            self.session.pending[item.lookup_name] = task
        try:
            filename = await task
        finally:
            if task.done():
                self.session.pending.pop(item.lookup_name, None)
        self.session.lookup_name_cache[item.lookup_name] = filename
        return filename

    async def resolve_filename(self, requiring_module: str, item: BundleItem) -> str:
        """Run the filename resolution chain for item.

        Raises:
            ResolutionFailure: Node-style resolution found nothing
        """
        self.session.resolutions += 1
        module_name = item.module_name

        if module_name in self.session.package_map:
            filename = self.session.package_map[module_name]
            logger.debug(f"Resolved [{module_name}] to bower package: {filename}")
            return filename

        alias = self.options.resolve.alias.get(module_name)
        if alias:
            base_dir = self.config.base_dir
            relative_path = os.path.relpath(os.path.join(base_dir, alias), base_dir)
            filename = os.path.normpath(os.path.join(base_dir, relative_path))
            logger.debug(f"Resolved [{module_name}] to alias: {filename}")
            return filename

        options: dict[str, Any] = {
            "extensions": self.options.resolve.extensions,
            "filename": None if item.is_npm_module() else requiring_module,
            "basedir": self.config.base_dir,
            "module_directories": self.options.resolve.directories,
            "modules": self.session.shims,
            "path_filter": self.path_filter,
        }
        try:
            return await node_resolve.resolve_async(module_name, **options)
        except node_resolve.ResolveError as e:
            diagnostic = {key: value for key, value in options.items() if key != "path_filter"}
            raise ResolutionFailure(module_name, requiring_module, diagnostic, e) from e

    def path_filter(self, pkg: dict[str, Any] | None, full_path: str, relative_path: str) -> str | None:
        """Redirect paths resolved inside a package through matching aliases."""
        if pkg is None or not relative_path:
            return None

        normalized_path = full_path.replace("\\", "/")
        for pattern, target in self.options.resolve.alias.items():
            if re.search(pattern, normalized_path):
                return os.path.join(full_path, target)
        return None

    async def _resolve_dependencies(self, item: BundleItem, buffer: list[BundleItem]) -> None:
        if not (item.is_script() and self.dependency_walker.has_require(item.source)):
            await asyncio.sleep(0)
            return

        assert item.filename is not None
        module_names = await self.dependency_walker.collect_javascript_dependencies(item)

        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self.resolve_module(item.filename, BundleItem(module_name), buffer))
                    for module_name in module_names
                ]
        except BaseExceptionGroup as e:
            failure = first_resolution_failure(e)
            if failure is None:
                raise
            raise failure from None

        for task in tasks:
            dependency = task.result()
            if dependency.filename:
                item.dependencies.append(dependency)
