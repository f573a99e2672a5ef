"""Reads bundle item sources from disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .bundle_item import BundleItem

logger = logging.getLogger(__name__)


class SourceReader:
    """Populates BundleItem.source from the resolved file.

    JSON files are wrapped as a CommonJS module so they can be bundled
    like any other script. Bytes that do not decode are replaced.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def read(self, item: BundleItem) -> None:
        if item.filename is None:
            raise ValueError(f"Cannot read unresolved module {item.module_name}")
        source = await asyncio.to_thread(Path(item.filename).read_text, encoding=self.encoding, errors="replace")
        if item.is_json():
            source = f"module.exports = {source.strip()};"
        item.source = source
        logger.debug(f"Read {len(source)} characters from {item.filename}")
