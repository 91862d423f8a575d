"""Public SDK surface for tarpipe.

This module provides a stable import path for library users.
It re-exports the client, its configuration and the error hierarchy.
"""

from __future__ import annotations

from core.config import RemoteStoreConfig
from core.errors import (
    TarpipeAuthError,
    TarpipeConfigError,
    TarpipeError,
    TarpipeFormatError,
    TarpipeIOError,
    TarpipeNotFoundError,
    TarpipeTransportError,
)
from core.types import DownloadPaths, DownloadResult
from pipeline.stage import PipelineStage, SinkStage, SourceStage
from pipeline.stage_runner import run_stages
from store.remote_store import RemoteStore
from store.tarball_sdk import TarClient

__all__ = [
    "DownloadPaths",
    "DownloadResult",
    "PipelineStage",
    "RemoteStore",
    "RemoteStoreConfig",
    "SinkStage",
    "SourceStage",
    "TarClient",
    "TarpipeAuthError",
    "TarpipeConfigError",
    "TarpipeError",
    "TarpipeFormatError",
    "TarpipeIOError",
    "TarpipeNotFoundError",
    "TarpipeTransportError",
    "run_stages",
]
