"""Unit tests for CLI command handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import main
from tests.fakes import FakeS3Client


def test_cli_pack_and_unpack_round_trip(source_tree: Path, tmp_path: Path) -> None:
    """CLI pack and unpack should succeed and restore the files."""
    tarball = tmp_path / "pkg.tgz"
    restored = tmp_path / "restored"

    pack_code = main(["pack", str(source_tree), str(tarball)])
    unpack_code = main(["unpack", str(tarball), str(restored)])

    assert pack_code == 0 and unpack_code == 0
    assert (restored / "lib" / "b.txt").read_bytes() == (source_tree / "lib" / "b.txt").read_bytes()


def test_cli_unpack_reports_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """A failing command should print the error and exit with status 1."""
    exit_code = main(["unpack", str(tmp_path / "missing.tgz"), str(tmp_path / "out")])

    assert exit_code == 1 and "tarpipe unpack failed" in capsys.readouterr().err


def test_cli_remote_command_requires_bucket(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Remote commands should fail cleanly without a bucket."""
    monkeypatch.delenv("TARPIPE_BUCKET", raising=False)

    exit_code = main(["exists", "pkg.tgz"])

    assert exit_code == 1 and "bucket" in capsys.readouterr().err


def test_cli_exists_and_upload_use_remote_store(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Remote commands should print their results."""
    fake = FakeS3Client({"present.tgz": b"x"})
    monkeypatch.setattr("store.remote_store.create_s3_client", lambda config: fake)
    tarball = tmp_path / "new.tgz"
    tarball.write_bytes(b"gz")

    exists_code = main(["--bucket", "tarballs", "exists", "present.tgz"])
    upload_code = main(["--bucket", "tarballs", "upload", "new.tgz", str(tarball)])
    lines = capsys.readouterr().out.split()

    assert exists_code == 0 and upload_code == 0
    assert lines == ["true", "https://s3.test/tarballs/new.tgz"]
