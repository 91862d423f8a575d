"""Local file endpoints for pipelines.

This module reads a file into a pipeline and writes a pipeline into a
file. Partial output is left in place when a pipeline fails.
"""

from __future__ import annotations

import asyncio
from os import PathLike
from pathlib import Path

from core.constants import DEFAULT_CHUNK_SIZE, FILE_READ_STAGE, FILE_WRITE_STAGE
from pipeline.channel import StageChannel
from pipeline.stage import SinkStage, SourceStage


class FileSourceStage(SourceStage):
    """Stream a local file in fixed-size chunks."""

    name = FILE_READ_STAGE

    def __init__(self, path: str | PathLike[str], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._path = Path(path)
        self._chunk_size = chunk_size

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        loop = asyncio.get_running_loop()
        handle = await loop.run_in_executor(None, self._path.open, "rb")
        try:
            while True:
                chunk = await loop.run_in_executor(None, handle.read, self._chunk_size)
                if not chunk:
                    return
                await outbound.send(chunk)
        finally:
            await loop.run_in_executor(None, handle.close)


class FileSinkStage(SinkStage):
    """Write the inbound stream to a local file, truncating it first.

    The stage completes only after the file is closed, so a successful
    pipeline implies the bytes reached the operating system.
    """

    name = FILE_WRITE_STAGE

    def __init__(self, path: str | PathLike[str]) -> None:
        self._path = Path(path)

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        loop = asyncio.get_running_loop()
        handle = await loop.run_in_executor(None, self._path.open, "wb")
        try:
            async for chunk in inbound:
                await loop.run_in_executor(None, handle.write, chunk)
        finally:
            await loop.run_in_executor(None, handle.close)
