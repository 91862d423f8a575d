"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import RemoteStoreConfig
from core.errors import TarpipeConfigError


def test_from_env_reads_bucket_and_session(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve bucket and session settings from environment."""
    monkeypatch.setenv("TARPIPE_BUCKET", "tarballs")
    monkeypatch.setenv("TARPIPE_S3_REGION", "eu-west-1")
    monkeypatch.setenv("TARPIPE_S3_ENDPOINT_URL", "http://localhost:9000")

    config = RemoteStoreConfig.from_env()

    assert (config.bucket, config.region) == ("tarballs", "eu-west-1")
    assert config.endpoint_url == "http://localhost:9000"


def test_from_env_prefers_explicit_bucket(monkeypatch: pytest.MonkeyPatch) -> None:
    """An explicit bucket should override the environment."""
    monkeypatch.setenv("TARPIPE_BUCKET", "from-env")

    assert RemoteStoreConfig.from_env(bucket="override").bucket == "override"


def test_from_env_raises_without_bucket(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail when no bucket is configured."""
    monkeypatch.delenv("TARPIPE_BUCKET", raising=False)

    with pytest.raises(TarpipeConfigError):
        RemoteStoreConfig.from_env()


def test_config_requires_complete_key_pair() -> None:
    """An access key without its secret should be rejected."""
    with pytest.raises(TarpipeConfigError):
        RemoteStoreConfig(bucket="tarballs", access_key_id="AKIA")
