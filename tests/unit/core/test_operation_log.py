"""Unit tests for per-operation structured logging."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import TarpipeIOError
from core.operation_log import OperationLog
from core.types import build_context
from tests.fakes import RecordingLog


def test_info_attaches_operation_context(recording_log: RecordingLog) -> None:
    """Every info event should carry the operation and its context."""
    log = OperationLog(recording_log, "pack", build_context(source=Path("/src"), target="out"))

    log.info("Finished pack tarball for /src", extra="x")

    assert recording_log.events == [
        (
            "info",
            "Finished pack tarball for /src",
            {"operation": "pack", "source": "/src", "target": "out", "extra": "x"},
        )
    ]


def test_failure_records_stage_message_code_and_stack(recording_log: RecordingLog) -> None:
    """Failure events should describe the failing stage and the error."""
    log = OperationLog(recording_log, "unpack", build_context(tarball="t.tgz"))
    try:
        raise TarpipeIOError("disk full", code="ENOSPC")
    except TarpipeIOError as error:
        log.failure("file.write", error)

    level, event, fields = recording_log.events[0]
    assert (level, event) == ("error", "Error in file.write operation")
    assert fields["stage"] == "file.write" and fields["tarball"] == "t.tgz"
    assert fields["message"] == "disk full" and fields["code"] == "ENOSPC"
    assert "TarpipeIOError: disk full" in fields["stack"]


def test_context_is_read_only() -> None:
    """Operation contexts should not be mutable after creation."""
    context = build_context(filename="a.tgz")

    with pytest.raises(TypeError):
        context["filename"] = "b.tgz"
