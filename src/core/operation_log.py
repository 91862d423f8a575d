"""Per-operation structured logging.

This module binds one operation's context to every start, success
and failure event so that log lines can be correlated per call.
"""

from __future__ import annotations

import traceback
from typing import Any

from core.constants import DEFAULT_LOGGER_NAME
from core.logging_config import get_logger
from core.types import OperationContext


class OperationLog:
    """Structured log facade for a single operation."""

    def __init__(self, sink: Any, operation: str, context: OperationContext) -> None:
        """Create an operation log.

        Args:
            sink: Logger exposing ``info(event, **fields)`` and
                ``error(event, **fields)``.
            operation: Operation name, e.g. ``pack``.
            context: Immutable fields attached to every event.
        """
        self._sink = sink
        self.operation = operation
        self.context = context

    def info(self, event: str, **fields: Any) -> None:
        """Log an info-level event with the operation context."""
        self._sink.info(event, operation=self.operation, **self.context, **fields)

    def failure(self, stage: str, error: BaseException) -> None:
        """Log a failed sub-operation.

        Args:
            stage: Identifier of the failing stage or backend call.
            error: Error raised by the stage.
        """
        self._sink.error(
            f"Error in {stage} operation",
            operation=self.operation,
            **self.context,
            stage=stage,
            message=str(error),
            code=getattr(error, "code", None),
            stack=_format_stack(error),
        )


def default_log_sink() -> Any:
    """Return the structured logger used when no sink is injected."""
    return get_logger(DEFAULT_LOGGER_NAME)


def _format_stack(error: BaseException) -> str:
    """Render the traceback chain of an error, including its cause."""
    lines = traceback.format_exception(type(error), error, error.__traceback__)
    return "".join(lines).rstrip()

