"""Unit tests for archive and extract stages."""

from __future__ import annotations

import io
from pathlib import Path
import tarfile

import pytest

from core.errors import TarpipeFormatError, TarpipeIOError
from core.operation_log import OperationLog
from core.types import build_context
from pipeline.archiver import create_archive_stream, create_extract_stream
from pipeline.stage_runner import run_stages
from tests.fakes import ChunkSource, CollectSink, RecordingLog


def _operation_log(recording_log: RecordingLog) -> OperationLog:
    return OperationLog(recording_log, "test", build_context(dir="out"))


def _tar_bytes(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as archive:
        for name, payload in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(payload)
            archive.addfile(info, io.BytesIO(payload))
    return buffer.getvalue()


@pytest.mark.asyncio
async def test_archive_stream_lists_entries_relative_to_source(
    source_tree: Path, recording_log: RecordingLog
) -> None:
    """Archive entries should not carry the source directory name."""
    sink = CollectSink()

    await run_stages([create_archive_stream(source_tree), sink], _operation_log(recording_log))

    with tarfile.open(fileobj=io.BytesIO(sink.data), mode="r") as archive:
        names = set(archive.getnames())
        blob = archive.extractfile("lib/nested/blob.bin").read()
    assert names == {"a.txt", "empty", "lib", "lib/b.txt", "lib/nested", "lib/nested/blob.bin"}
    assert blob == (source_tree / "lib" / "nested" / "blob.bin").read_bytes()


@pytest.mark.asyncio
async def test_archive_stream_fails_for_missing_source(
    tmp_path: Path, recording_log: RecordingLog
) -> None:
    """A missing source directory should fail as an IO error of the archive stage."""
    stages = [create_archive_stream(tmp_path / "missing"), CollectSink()]

    with pytest.raises(TarpipeIOError) as caught:
        await run_stages(stages, _operation_log(recording_log))

    assert caught.value.stage == "archive" and caught.value.code == "ENOENT"


@pytest.mark.asyncio
async def test_extract_stream_writes_members(tmp_path: Path, recording_log: RecordingLog) -> None:
    """Extraction should create the target directory and the member files."""
    payload = _tar_bytes({"a.txt": b"alpha", "sub/b.txt": b"beta"})
    chunks = [payload[index : index + 1000] for index in range(0, len(payload), 1000)]
    target = tmp_path / "out"

    await run_stages(
        [ChunkSource(chunks), create_extract_stream(target)], _operation_log(recording_log)
    )

    assert (target / "a.txt").read_bytes() == b"alpha"
    assert (target / "sub" / "b.txt").read_bytes() == b"beta"


@pytest.mark.asyncio
async def test_extract_stream_rejects_malformed_archive(
    tmp_path: Path, recording_log: RecordingLog
) -> None:
    """Non-tar input should fail as a format error of the extract stage."""
    stages = [ChunkSource([b"x" * 2048]), create_extract_stream(tmp_path / "out")]

    with pytest.raises(TarpipeFormatError) as caught:
        await run_stages(stages, _operation_log(recording_log))

    assert caught.value.stage == "extract"


@pytest.mark.asyncio
async def test_extract_stream_refuses_paths_outside_target(
    tmp_path: Path, recording_log: RecordingLog
) -> None:
    """Members escaping the target directory should fail as path errors."""
    stages = [
        ChunkSource([_tar_bytes({"../escape.txt": b"nope"})]),
        create_extract_stream(tmp_path / "out"),
    ]

    with pytest.raises(TarpipeIOError) as caught:
        await run_stages(stages, _operation_log(recording_log))

    assert caught.value.code == "EPATH" and not (tmp_path / "escape.txt").exists()
