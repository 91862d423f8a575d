"""Python SDK for tarball operations.

This module exposes the pack, unpack, upload, download, exists and
remove operations. Streaming operations are composed from pipeline
stages; the rest delegate to the remote store. Every operation logs its
start, its success and any failure with the operation's context.
"""

from __future__ import annotations

from os import PathLike
from typing import Any, Awaitable, BinaryIO, Callable, Mapping, TypeVar

from core.config import RemoteStoreConfig
from core.constants import (
    DEFAULT_COMPRESSION_LEVEL,
    REMOTE_DOWNLOAD_STAGE,
    REMOTE_EXISTS_OPERATION,
    REMOTE_REMOVE_OPERATION,
    REMOTE_UPLOAD_OPERATION,
)
from core.errors import TarpipeConfigError, TarpipeError
from core.operation_log import OperationLog, default_log_sink
from core.types import DownloadPaths, DownloadResult, build_context
from pipeline.archiver import create_archive_stream, create_extract_stream
from pipeline.compressor import (
    create_compress_stream,
    create_decompress_stream,
    validate_compression_level,
)
from pipeline.file_stages import FileSinkStage, FileSourceStage
from pipeline.stage_runner import run_stages
from store.remote_store import RemoteStore

_ResultT = TypeVar("_ResultT")


class TarClient:
    """Primary SDK entry point for tarball workflows."""

    def __init__(
        self,
        config: RemoteStoreConfig | None = None,
        log: Any | None = None,
        s3_client: Any | None = None,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    ) -> None:
        """Create SDK client.

        Args:
            config: Remote store configuration; only remote operations need it.
            log: Logger with ``info(event, **fields)`` and ``error(event, **fields)``.
                Defaults to the structured ``tarpipe`` logger.
            s3_client: Optional pre-built S3 client used instead of boto3.
            compression_level: Gzip level used by ``pack``.

        Raises:
            TarpipeConfigError: If ``compression_level`` is outside 0-9.
        """
        self._config = config
        self._s3_client = s3_client
        self._store: RemoteStore | None = None
        self._compression_level = validate_compression_level(compression_level)
        self.log = log if log is not None else default_log_sink()

    async def pack(self, source: str | PathLike[str], target: str | PathLike[str]) -> None:
        """Archive and gzip ``source`` into the file ``target``.

        Raises:
            TarpipeIOError: If the source cannot be read or target written.
        """
        log = self._operation_log("pack", source=source, target=target)
        log.info(f"Start to pack tarball for {source}")
        await run_stages(
            [
                create_archive_stream(source),
                create_compress_stream(self._compression_level),
                FileSinkStage(target),
            ],
            log,
        )
        log.info(f"Finished pack tarball for {source}")

    async def unpack(self, tarball: str | PathLike[str], directory: str | PathLike[str]) -> None:
        """Decompress and extract ``tarball`` into ``directory``.

        Raises:
            TarpipeIOError: If the tarball cannot be read or files written.
            TarpipeFormatError: If the tarball is corrupt.
        """
        log = self._operation_log("unpack", tarball=tarball, dir=directory)
        log.info(f"Start to unpack tarball for {tarball}")
        await run_stages(
            [
                FileSourceStage(tarball),
                create_decompress_stream(),
                create_extract_stream(directory),
            ],
            log,
        )
        log.info(f"Finished unpack tarball for {tarball}")

    async def upload(self, filename: str, tarball: str | PathLike[str] | BinaryIO) -> str:
        """Upload a tarball to the remote store under ``filename``.

        Returns:
            Access URL of the uploaded object.

        Raises:
            TarpipeTransportError: On network or backend faults.
            TarpipeAuthError: On credential faults.
        """
        log = self._operation_log("upload", tarball=_describe_source(tarball), filename=filename)
        log.info("Start to upload tarball for package")
        url = await self._remote_call(
            log, REMOTE_UPLOAD_OPERATION, lambda store: store.upload(tarball, filename)
        )
        log.info("Finished uploading tarball for package", url=url)
        return url

    async def download(
        self, filename: str, paths: DownloadPaths | Mapping[str, Any] | str | PathLike[str]
    ) -> DownloadResult:
        """Stream a remote tarball into ``paths.tarball``.

        Returns:
            Name of the object and the local path written.

        Raises:
            TarpipeNotFoundError: If the object does not exist.
            TarpipeTransportError: On other backend faults.
            TarpipeIOError: If the local file cannot be written.
            TarpipeConfigError: If ``paths`` names no tarball or no remote store is configured.
        """
        log = self._operation_log("download", filename=filename)
        try:
            destination = DownloadPaths.coerce(paths)
            store = self._remote()
        except TarpipeError as error:
            log.failure(REMOTE_DOWNLOAD_STAGE, error.attribute(REMOTE_DOWNLOAD_STAGE, log.context))
            raise
        log = self._operation_log("download", filename=filename, tarball=destination.tarball)
        log.info("Start to download tarball for package")
        await run_stages([store.download(filename), FileSinkStage(destination.tarball)], log)
        log.info(f"Finished downloading tarball and written to {destination.tarball}")
        return DownloadResult(name=filename, path=destination.tarball)

    async def exists(self, filename: str) -> bool:
        """Return whether ``filename`` exists in the remote store.

        Raises:
            TarpipeTransportError: On backend faults other than not-found.
        """
        log = self._operation_log("exists", filename=filename)
        log.info(f"Start to check tarball {filename} in remote storage")
        found = await self._remote_call(
            log, REMOTE_EXISTS_OPERATION, lambda store: store.exists(filename)
        )
        if found:
            log.info(f"tarball {filename} exists in remote storage.")
        else:
            log.info(f"tarball {filename} is not found in remote storage.")
        return found

    async def remove(self, filename: str) -> None:
        """Delete ``filename`` from the remote store.

        Raises:
            TarpipeTransportError: If the backend call fails.
        """
        log = self._operation_log("remove", filename=filename)
        log.info(f"Start to remove tarball {filename} from remote storage")
        await self._remote_call(log, REMOTE_REMOVE_OPERATION, lambda store: store.remove(filename))
        log.info(f"Removed tarball {filename} from remote storage")

    def _operation_log(self, operation: str, **fields: Any) -> OperationLog:
        return OperationLog(self.log, operation, build_context(**fields))

    def _remote(self) -> RemoteStore:
        if self._config is None:
            raise TarpipeConfigError(
                "Remote operations require a RemoteStoreConfig with a bucket."
            )
        if self._store is None:
            self._store = RemoteStore(self._config, self._s3_client)
        return self._store

    async def _remote_call(
        self,
        log: OperationLog,
        operation: str,
        call: Callable[[RemoteStore], Awaitable[_ResultT]],
    ) -> _ResultT:
        try:
            return await call(self._remote())
        except TarpipeError as error:
            log.failure(operation, error.attribute(operation, log.context))
            raise


def _describe_source(source: str | PathLike[str] | BinaryIO) -> str:
    """Return a loggable name for a path or file object."""
    if isinstance(source, (str, PathLike)):
        return str(source)
    return str(getattr(source, "name", "<stream>"))
