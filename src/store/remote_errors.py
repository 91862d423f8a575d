"""Remote backend error classification.

This module maps boto3 and botocore failures onto the tarpipe error
hierarchy while keeping the backend message intact.
"""

from __future__ import annotations

from botocore.exceptions import ClientError, NoCredentialsError, PartialCredentialsError

from core.constants import AUTH_ERROR_CODES, NOT_FOUND_ERROR_CODES
from core.errors import (
    TarpipeAuthError,
    TarpipeError,
    TarpipeNotFoundError,
    TarpipeTransportError,
)


def classify_remote_error(error: Exception) -> TarpipeError:
    """Translate a backend exception into a domain error.

    Args:
        error: Exception raised by the S3 client.

    Returns:
        ``TarpipeNotFoundError`` for missing objects, ``TarpipeAuthError``
        for credential faults and ``TarpipeTransportError`` otherwise.
    """
    code = _backend_code(error)
    if code in NOT_FOUND_ERROR_CODES:
        return TarpipeNotFoundError(str(error), code=code)
    if code in AUTH_ERROR_CODES or isinstance(
        error, (NoCredentialsError, PartialCredentialsError)
    ):
        return TarpipeAuthError(str(error), code=code)
    return TarpipeTransportError(str(error), code=code)


def _backend_code(error: Exception) -> str | None:
    """Extract the backend error code.

    Transfer-manager errors such as ``S3UploadFailedError`` are raised while
    handling a ``ClientError``; the code is read from that context.
    """
    if not isinstance(error, ClientError) and isinstance(error.__context__, ClientError):
        error = error.__context__
    if isinstance(error, ClientError):
        return str(error.response.get("Error", {}).get("Code", "")) or None
    code = getattr(error, "code", None)
    return str(code) if code is not None else None
