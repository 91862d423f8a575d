"""Shared typed models.

This module defines immutable data models used by the pipeline,
store and SDK layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from core.errors import TarpipeConfigError

OperationContext = Mapping[str, Any]


def build_context(**fields: Any) -> OperationContext:
    """Freeze operation fields into a read-only context mapping."""
    frozen = {
        key: str(value) if isinstance(value, Path) else value for key, value in fields.items()
    }
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class DownloadPaths:
    """Local destinations for a download.

    Attributes:
        tarball: File path the downloaded bytes are written to.
    """

    tarball: Path

    @classmethod
    def coerce(cls, paths: "DownloadPaths | Mapping[str, Any] | str | Path") -> "DownloadPaths":
        """Accept a ``DownloadPaths``, a ``{"tarball": ...}`` mapping or a bare path.

        Raises:
            TarpipeConfigError: If a mapping has no ``tarball`` entry.
        """
        if isinstance(paths, DownloadPaths):
            return paths
        if isinstance(paths, Mapping):
            if paths.get("tarball") is None:
                raise TarpipeConfigError("Download paths must name a 'tarball' file.")
            return cls(tarball=Path(paths["tarball"]))
        return cls(tarball=Path(paths))


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of a completed download.

    Attributes:
        name: Remote object name.
        path: Local file holding the downloaded bytes.
    """

    name: str
    path: Path
