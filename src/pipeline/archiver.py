"""Directory to tar stream stages.

This module turns a directory tree into a tar byte stream and a tar byte
stream back into files, using ``tarfile`` in stream mode so neither side
needs a seekable file. The codec runs on a dedicated thread per
stage, outside the shared executor used by file stages.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from os import PathLike
from pathlib import Path
import tarfile

from core.constants import ARCHIVE_STAGE, EXTRACT_STAGE
from pipeline.channel import StageChannel
from pipeline.stage import SinkStage, SourceStage
from pipeline.thread_bridge import ChannelReader, ChannelWriter


class ArchiveStage(SourceStage):
    """Produce a tar stream of a directory's contents.

    Entry names are relative to the source directory, matching what
    ``tar -C source -cf - .`` would contain without the leading ``./``.
    """

    name = ARCHIVE_STAGE

    def __init__(self, source_directory: str | PathLike[str]) -> None:
        self._source = Path(source_directory)

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        loop = asyncio.get_running_loop()
        writer = ChannelWriter(outbound, loop)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tarpipe-archive")
        try:
            await loop.run_in_executor(executor, self._write_archive, writer)
        finally:
            executor.shutdown(wait=False)

    def _write_archive(self, writer: ChannelWriter) -> None:
        entries = sorted(self._source.iterdir())
        with tarfile.open(fileobj=writer, mode="w|") as archive:
            for entry in entries:
                archive.add(str(entry), arcname=entry.name)


class ExtractStage(SinkStage):
    """Materialize a tar stream under a target directory."""

    name = EXTRACT_STAGE

    def __init__(self, target_directory: str | PathLike[str]) -> None:
        self._target = Path(target_directory)

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        loop = asyncio.get_running_loop()
        reader = ChannelReader(inbound, loop)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tarpipe-extract")
        try:
            await loop.run_in_executor(executor, self._extract_archive, reader)
        finally:
            executor.shutdown(wait=False)
        async for _ in inbound:
            pass

    def _extract_archive(self, reader: ChannelReader) -> None:
        self._target.mkdir(parents=True, exist_ok=True)
        with tarfile.open(fileobj=reader, mode="r|") as archive:
            archive.extractall(self._target, filter="data")


def create_archive_stream(source_directory: str | PathLike[str]) -> ArchiveStage:
    """Build the stage archiving ``source_directory``.

    The stage fails with ``TarpipeIOError`` when the directory is missing
    or unreadable.
    """
    return ArchiveStage(source_directory)


def create_extract_stream(target_directory: str | PathLike[str]) -> ExtractStage:
    """Build the stage extracting an archive under ``target_directory``.

    The stage fails with ``TarpipeIOError`` on permission errors or unsafe
    member paths and with ``TarpipeFormatError`` on malformed archive data.
    """
    return ExtractStage(target_directory)
