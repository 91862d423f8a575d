"""Pipeline stage contracts.

A stage reads byte chunks from an inbound channel, writes byte chunks to
an outbound channel, or both. Returning from ``run`` is the stage's
completion event and raising is its failure event.
"""

from __future__ import annotations

import abc

from pipeline.channel import StageChannel


class PipelineStage(abc.ABC):
    """Unidirectional data-flow node of a pipeline.

    Attributes:
        name: Stable identifier used for error attribution in logs.
        consumes: Whether the stage reads an inbound channel.
        produces: Whether the stage writes an outbound channel.
    """

    name = "stage"
    consumes = True
    produces = True

    @abc.abstractmethod
    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        """Move bytes until the stage is done.

        The runner closes ``outbound`` after this coroutine returns, so
        stages never close their own output.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class SourceStage(PipelineStage):
    """Stage producing bytes without an inbound channel."""

    consumes = False


class SinkStage(PipelineStage):
    """Terminal stage consuming bytes without an outbound channel."""

    produces = False
