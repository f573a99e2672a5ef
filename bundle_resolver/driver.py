"""Entry driver: resolves a set of entry files into a flat bundle listing."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from dataclasses import field

from .bundle_item import BundleItem
from .config import Configuration
from .errors import ResolutionFailure
from .package_map import PackageLister
from .resolver import DependencyWalkerProtocol
from .resolver import Resolver
from .resolver import SourceReaderProtocol
from .resolver import first_resolution_failure

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """Outcome of resolving a set of entry files.

    Attributes:
        ok: True when every reachable module resolved
        entries: One item per entry file, in the order given
        items: Every walked item, each file once, in completion order
        error: The failure that aborted the run, when ok is False
    """

    ok: bool
    entries: list[BundleItem] = field(default_factory=list)
    items: list[BundleItem] = field(default_factory=list)
    error: ResolutionFailure | None = None

    @property
    def filenames(self) -> list[str]:
        return [item.filename for item in self.items if item.filename]


class Bundler:
    """Runs one resolution session per call to resolve_entries()."""

    def __init__(
        self,
        config: Configuration,
        dependency_walker: DependencyWalkerProtocol | None = None,
        source_reader: SourceReaderProtocol | None = None,
        package_lister: PackageLister | None = None,
    ):
        self.config = config
        self.dependency_walker = dependency_walker
        self.source_reader = source_reader
        self.package_lister = package_lister

    def create_resolver(self) -> Resolver:
        return Resolver(
            self.config,
            dependency_walker=self.dependency_walker,
            source_reader=self.source_reader,
            package_lister=self.package_lister,
        )

    async def resolve_entries(self, entry_files: list[str]) -> ResolutionResult:
        """Resolve entry files and everything they require.

        Entry files are resolved concurrently against a fresh session. A
        resolution failure is returned rather than raised.
        """
        resolver = self.create_resolver()
        await resolver.initialize()
        await resolver.wait_until_ready()

        buffer: list[BundleItem] = []
        entries = [BundleItem(os.path.abspath(entry)) for entry in entry_files]

        try:
            async with asyncio.TaskGroup() as group:
                for entry in entries:
                    group.create_task(resolver.resolve_module(entry.module_name, entry, buffer))
        except BaseExceptionGroup as e:
            failure = first_resolution_failure(e)
            if failure is None:
                raise
            logger.error(f"Resolution failed: {failure.module_name} from {failure.requiring_module}")
            return ResolutionResult(ok=False, error=failure)

        logger.info(
            f"Resolved {len(entries)} entries to {len(buffer)} files "
            f"({resolver.session.resolutions} lookups, {resolver.session.reads} reads)"
        )
        return ResolutionResult(ok=True, entries=entries, items=buffer)
