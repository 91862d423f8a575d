"""Unit tests for the bounded stage channel."""

from __future__ import annotations

import asyncio

import pytest

from core.errors import PipelineAbortedError, TarpipeConfigError
from pipeline.channel import StageChannel


@pytest.mark.asyncio
async def test_channel_delivers_chunks_in_order_then_end_of_stream() -> None:
    """Receivers should see chunks in send order and ``None`` after close."""
    channel = StageChannel(depth=4)
    for chunk in (b"a", b"b", b"c"):
        await channel.send(chunk)
    await channel.close()

    received = [chunk async for chunk in channel]

    assert received == [b"a", b"b", b"c"] and await channel.receive() is None


@pytest.mark.asyncio
async def test_channel_applies_back_pressure_when_full() -> None:
    """A send should wait until the consumer frees a slot."""
    channel = StageChannel(depth=1)
    await channel.send(b"first")
    pending = asyncio.create_task(channel.send(b"second"))
    await asyncio.sleep(0)
    blocked = not pending.done()

    assert await channel.receive() == b"first"
    await pending

    assert blocked and await channel.receive() == b"second"


@pytest.mark.asyncio
async def test_channel_ignores_empty_chunks() -> None:
    """Empty chunks should never reach the consumer."""
    channel = StageChannel()
    await channel.send(b"")
    await channel.send(b"x")
    await channel.close()

    assert [chunk async for chunk in channel] == [b"x"]


@pytest.mark.asyncio
async def test_abort_wakes_waiting_receiver() -> None:
    """Aborting should release a receiver blocked on an empty channel."""
    channel = StageChannel()
    waiting = asyncio.create_task(channel.receive())
    await asyncio.sleep(0)

    await channel.abort()

    with pytest.raises(PipelineAbortedError):
        await waiting
    assert channel.aborted


@pytest.mark.asyncio
async def test_abort_wakes_waiting_sender() -> None:
    """Aborting should release a sender blocked on a full channel."""
    channel = StageChannel(depth=1)
    await channel.send(b"fill")
    waiting = asyncio.create_task(channel.send(b"blocked"))
    await asyncio.sleep(0)

    await channel.abort()

    with pytest.raises(PipelineAbortedError):
        await waiting


@pytest.mark.asyncio
async def test_send_after_close_is_rejected() -> None:
    """Producers must not write after end of stream."""
    channel = StageChannel()
    await channel.close()

    with pytest.raises(TarpipeConfigError):
        await channel.send(b"late")


def test_channel_rejects_non_positive_depth() -> None:
    """Channel depth must be positive."""
    with pytest.raises(TarpipeConfigError):
        StageChannel(depth=0)
