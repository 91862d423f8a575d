"""Core constants used across tarpipe modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_LOGGER_NAME = "tarpipe"
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_CHANNEL_DEPTH = 8
DEFAULT_COMPRESSION_LEVEL = 6
GZIP_WBITS = 31
AUTO_DETECT_WBITS = 47

ARCHIVE_STAGE = "archive"
EXTRACT_STAGE = "extract"
COMPRESS_STAGE = "compress"
DECOMPRESS_STAGE = "decompress"
FILE_READ_STAGE = "file.read"
FILE_WRITE_STAGE = "file.write"
REMOTE_DOWNLOAD_STAGE = "remote.download"
REMOTE_UPLOAD_OPERATION = "remote.upload"
REMOTE_EXISTS_OPERATION = "remote.exists"
REMOTE_REMOVE_OPERATION = "remote.remove"

NOT_FOUND_ERROR_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
AUTH_ERROR_CODES = frozenset(
    {
        "403",
        "AccessDenied",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "ExpiredToken",
        "InvalidToken",
    }
)
