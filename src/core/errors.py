"""Tarpipe exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each error keeps the original message and carries the failing stage,
the operation context and a diagnostic code once it is attributed.
"""

from __future__ import annotations

import errno
import tarfile
import zlib
from typing import Any, Mapping


class TarpipeError(Exception):
    """Base exception for all tarpipe failures."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.stage: str | None = None
        self.context: Mapping[str, Any] = {}

    def attribute(self, stage: str, context: Mapping[str, Any]) -> "TarpipeError":
        """Record which stage raised the error and for which operation.

        The first attribution wins so that re-raising through nested
        pipelines keeps the innermost stage name.
        """
        if self.stage is None:
            self.stage = stage
            self.context = context
        return self


class TarpipeConfigError(TarpipeError):
    """Raised for invalid runtime configuration or pipeline wiring."""


class TarpipeIOError(TarpipeError):
    """Raised for local filesystem faults."""


class TarpipeFormatError(TarpipeError):
    """Raised for malformed archive or compressed data."""


class TarpipeTransportError(TarpipeError):
    """Raised for remote backend network or protocol faults."""


class TarpipeAuthError(TarpipeTransportError):
    """Raised for remote credential or permission faults.

    A backend fault like any other, so callers handling
    ``TarpipeTransportError`` also see credential failures.
    """


class TarpipeNotFoundError(TarpipeError):
    """Raised when a requested remote object does not exist."""


class PipelineAbortedError(TarpipeError):
    """Raised inside a stage whose pipeline already resolved."""


def errno_code(error: OSError) -> str | None:
    """Return the symbolic errno name (``ENOENT``) for an OS error."""
    if error.errno is None:
        return None
    return errno.errorcode.get(error.errno, str(error.errno))


def as_tarpipe_error(error: BaseException) -> TarpipeError:
    """Normalize a raw stage exception into the tarpipe hierarchy.

    Args:
        error: Exception raised by a stage.

    Returns:
        The same error when already a ``TarpipeError``, otherwise a domain
        error with the original message chained to the original exception.
    """
    if isinstance(error, TarpipeError):
        return error
    if isinstance(error, tarfile.FilterError):
        wrapped: TarpipeError = TarpipeIOError(str(error), code="EPATH")
    elif isinstance(error, OSError):
        wrapped = TarpipeIOError(str(error), code=errno_code(error))
    elif isinstance(error, zlib.error):
        wrapped = TarpipeFormatError(str(error), code="Z_DATA_ERROR")
    elif isinstance(error, tarfile.TarError):
        wrapped = TarpipeFormatError(str(error), code="TAR_BAD_ARCHIVE")
    else:
        wrapped = TarpipeError(str(error))
    wrapped.__cause__ = error
    return wrapped
