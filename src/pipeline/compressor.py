"""Streaming gzip stages.

This module compresses and decompresses byte chunks incrementally with
``zlib`` so compression overlaps with the neighbouring stages.
"""

from __future__ import annotations

import zlib

from core.constants import (
    AUTO_DETECT_WBITS,
    COMPRESS_STAGE,
    DECOMPRESS_STAGE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_COMPRESSION_LEVEL,
    GZIP_WBITS,
)
from core.errors import TarpipeConfigError, TarpipeFormatError
from pipeline.channel import StageChannel
from pipeline.stage import PipelineStage


def validate_compression_level(level: int) -> int:
    """Return ``level`` if zlib accepts it.

    Raises:
        TarpipeConfigError: If the level is outside 0-9.
    """
    if not 0 <= level <= 9:
        raise TarpipeConfigError(f"Compression level must be within 0-9, got {level}.")
    return level


class CompressStage(PipelineStage):
    """Gzip-compress the inbound stream."""

    name = COMPRESS_STAGE

    def __init__(self, level: int = DEFAULT_COMPRESSION_LEVEL) -> None:
        self._level = validate_compression_level(level)

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        compressor = zlib.compressobj(self._level, zlib.DEFLATED, GZIP_WBITS)
        async for chunk in inbound:
            await outbound.send(compressor.compress(chunk))
        await outbound.send(compressor.flush())


class DecompressStage(PipelineStage):
    """Inflate a gzip or zlib stream, including concatenated gzip members.

    Output is emitted in blocks of at most ``max_output`` bytes, however
    far a single inbound chunk expands.
    """

    name = DECOMPRESS_STAGE

    def __init__(self, max_output: int = DEFAULT_CHUNK_SIZE) -> None:
        if max_output <= 0:
            raise TarpipeConfigError(f"Output block size must be positive, got {max_output}.")
        self._max_output = max_output

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        decompressor = None
        async for chunk in inbound:
            while chunk:
                if decompressor is None or decompressor.eof:
                    decompressor = zlib.decompressobj(AUTO_DETECT_WBITS)
                await self._inflate(decompressor, chunk, outbound)
                chunk = decompressor.unused_data if decompressor.eof else b""
        if decompressor is None or not decompressor.eof:
            raise TarpipeFormatError("unexpected end of file", code="Z_BUF_ERROR")

    async def _inflate(self, decompressor, data: bytes, outbound: StageChannel) -> None:
        while True:
            block = decompressor.decompress(data, self._max_output)
            await outbound.send(block)
            data = decompressor.unconsumed_tail
            # A full block may leave output pending inside zlib even with no input left.
            if decompressor.eof or (not data and len(block) < self._max_output):
                return


def create_compress_stream(level: int = DEFAULT_COMPRESSION_LEVEL) -> CompressStage:
    """Build a gzip compression stage."""
    return CompressStage(level)


def create_decompress_stream(max_output: int = DEFAULT_CHUNK_SIZE) -> DecompressStage:
    """Build a decompression stage; corrupt input fails with ``TarpipeFormatError``."""
    return DecompressStage(max_output)
