"""Bounded byte channel joining two pipeline stages.

This module provides the back-pressured hand-off between a producing
stage and the next consuming stage on the event loop.
"""

from __future__ import annotations

import asyncio
from collections import deque

from core.constants import DEFAULT_CHANNEL_DEPTH
from core.errors import PipelineAbortedError, TarpipeConfigError


class StageChannel:
    """Single-producer, single-consumer queue of byte chunks.

    ``receive`` returns ``None`` once the producer closed the channel and
    every buffered chunk was consumed. ``abort`` wakes both ends, which
    then raise ``PipelineAbortedError``.
    """

    def __init__(self, depth: int = DEFAULT_CHANNEL_DEPTH) -> None:
        if depth <= 0:
            raise TarpipeConfigError(f"Channel depth must be positive, got {depth}.")
        self._depth = depth
        self._chunks: deque[bytes] = deque()
        self._closed = False
        self._aborted = False
        self._condition = asyncio.Condition()

    @property
    def aborted(self) -> bool:
        return self._aborted

    async def send(self, chunk: bytes) -> None:
        """Queue a chunk, waiting while the channel is full."""
        if not chunk:
            return
        async with self._condition:
            await self._condition.wait_for(
                lambda: self._aborted or len(self._chunks) < self._depth
            )
            self._raise_if_aborted()
            if self._closed:
                raise TarpipeConfigError("Cannot send on a closed stage channel.")
            self._chunks.append(chunk)
            self._condition.notify_all()

    async def receive(self) -> bytes | None:
        """Return the next chunk, or ``None`` at end of stream."""
        async with self._condition:
            await self._condition.wait_for(
                lambda: self._aborted or self._closed or bool(self._chunks)
            )
            self._raise_if_aborted()
            if not self._chunks:
                return None
            chunk = self._chunks.popleft()
            self._condition.notify_all()
            return chunk

    async def close(self) -> None:
        """Mark end of stream; buffered chunks stay readable."""
        async with self._condition:
            self._closed = True
            self._condition.notify_all()

    async def abort(self) -> None:
        """Tear the channel down and release both ends."""
        async with self._condition:
            self._aborted = True
            self._chunks.clear()
            self._condition.notify_all()

    def __aiter__(self) -> "StageChannel":
        return self

    async def __anext__(self) -> bytes:
        chunk = await self.receive()
        if chunk is None:
            raise StopAsyncIteration
        return chunk

    def _raise_if_aborted(self) -> None:
        if self._aborted:
            raise PipelineAbortedError("Pipeline already resolved; stage channel aborted.")
