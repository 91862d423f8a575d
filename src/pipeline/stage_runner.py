"""Pipeline composition and outcome resolution.

This module wires an ordered list of stages through bounded channels,
runs them concurrently on the event loop and folds their terminal
events into one outcome. The first stage failure wins; success is only
reported once the terminal stage returned.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from core.constants import DEFAULT_CHANNEL_DEPTH
from core.errors import PipelineAbortedError, TarpipeConfigError, TarpipeError, as_tarpipe_error
from core.operation_log import OperationLog
from pipeline.channel import StageChannel
from pipeline.stage import PipelineStage


async def run_stages(
    stages: Sequence[PipelineStage],
    log: OperationLog,
    channel_depth: int = DEFAULT_CHANNEL_DEPTH,
) -> None:
    """Run connected stages until the pipeline resolves.

    Args:
        stages: Ordered stages, producer first and sink last.
        log: Operation log receiving one error event per failed stage.
        channel_depth: Number of chunks buffered between two stages.

    Raises:
        TarpipeConfigError: If the stages cannot be connected.
        TarpipeError: The first stage failure, attributed to its stage.
    """
    _validate_stages(stages)
    runner = _PipelineRun(stages, log, channel_depth)
    await runner.resolve()


class _PipelineRun:
    """State of one pipeline invocation."""

    def __init__(
        self, stages: Sequence[PipelineStage], log: OperationLog, channel_depth: int
    ) -> None:
        self._stages = tuple(stages)
        self._log = log
        self._channels = [StageChannel(channel_depth) for _ in self._stages[1:]]
        self._outcome: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    async def resolve(self) -> None:
        tasks = [
            asyncio.create_task(self._observe(index, stage), name=f"tarpipe:{stage.name}")
            for index, stage in enumerate(self._stages)
        ]
        try:
            await self._outcome
        finally:
            for channel in self._channels:
                await channel.abort()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _observe(self, index: int, stage: PipelineStage) -> None:
        inbound = self._channels[index - 1] if index > 0 else None
        outbound = self._channels[index] if index < len(self._channels) else None
        try:
            await stage.run(inbound, outbound)
            if outbound is not None:
                await outbound.close()
        except PipelineAbortedError:
            return
        except Exception as raw_error:
            error = as_tarpipe_error(raw_error).attribute(stage.name, self._log.context)
            self._log.failure(stage.name, error)
            self._settle(error)
            return
        if outbound is None:
            self._settle(None)

    def _settle(self, error: TarpipeError | None) -> None:
        if self._outcome.done():
            return
        if error is None:
            self._outcome.set_result(None)
        else:
            self._outcome.set_exception(error)


def _validate_stages(stages: Sequence[PipelineStage]) -> None:
    """Check that stages form a producer-to-sink chain.

    Raises:
        TarpipeConfigError: If the chain is too short or ends are mismatched.
    """
    if len(stages) < 2:
        raise TarpipeConfigError(
            f"A pipeline needs at least two stages, got {len(stages)}."
        )
    if stages[0].consumes:
        raise TarpipeConfigError(f"First stage {stages[0]!r} must not require input.")
    if stages[-1].produces:
        raise TarpipeConfigError(f"Last stage {stages[-1]!r} must not produce output.")
    for stage in stages[1:-1]:
        if not (stage.consumes and stage.produces):
            raise TarpipeConfigError(f"Middle stage {stage!r} must consume and produce bytes.")
