"""Blocking file-like adapters over stage channels.

The ``tarfile`` codec only speaks synchronous file objects, so archive
stages run it in an executor thread and move bytes through these
adapters, which hop back onto the event loop for every channel call.
"""

from __future__ import annotations

import asyncio

from pipeline.channel import StageChannel


class ChannelWriter:
    """Write-only file object forwarding bytes to a channel."""

    def __init__(self, channel: StageChannel, loop: asyncio.AbstractEventLoop) -> None:
        self._channel = channel
        self._loop = loop

    def write(self, data: bytes) -> int:
        chunk = bytes(data)
        asyncio.run_coroutine_threadsafe(self._channel.send(chunk), self._loop).result()
        return len(chunk)

    def flush(self) -> None:
        return None


class ChannelReader:
    """Read-only file object draining a channel."""

    def __init__(self, channel: StageChannel, loop: asyncio.AbstractEventLoop) -> None:
        self._channel = channel
        self._loop = loop
        self._buffer = bytearray()
        self._eof = False

    def read(self, size: int | None = -1) -> bytes:
        while not self._eof and (size is None or size < 0 or len(self._buffer) < size):
            chunk = asyncio.run_coroutine_threadsafe(
                self._channel.receive(), self._loop
            ).result()
            if chunk is None:
                self._eof = True
            else:
                self._buffer.extend(chunk)
        if size is None or size < 0:
            size = len(self._buffer)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data
