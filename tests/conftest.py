"""Pytest configuration and shared fixtures for tarpipe tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fakes import RecordingLog


@pytest.fixture
def recording_log() -> RecordingLog:
    """Log sink capturing structured events in memory."""
    return RecordingLog()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Small directory tree with nested, empty and binary entries."""
    root = tmp_path / "pkg"
    (root / "lib" / "nested").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("alpha\n", encoding="utf-8")
    (root / "lib" / "b.txt").write_text("beta\n" * 1000, encoding="utf-8")
    (root / "lib" / "nested" / "blob.bin").write_bytes(bytes(range(256)) * 700)
    return root
