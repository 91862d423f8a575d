"""Remote object store adapter.

This module is a thin facade over a boto3 S3 client. Blocking client calls
run on the loop's default executor; downloads are exposed as a pipeline
source stage so they can be chained with local file sinks.
"""

from __future__ import annotations

import asyncio
from functools import partial
from os import PathLike
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import quote

from core.config import RemoteStoreConfig
from core.constants import DEFAULT_CHUNK_SIZE, REMOTE_DOWNLOAD_STAGE
from core.errors import TarpipeError, TarpipeNotFoundError, as_tarpipe_error
from pipeline.channel import StageChannel
from pipeline.stage import SourceStage
from store.remote_errors import classify_remote_error
from store.s3_client import create_s3_client


class RemoteStore:
    """Bucket-scoped upload, download, stat and delete operations."""

    def __init__(self, config: RemoteStoreConfig, client: Any | None = None) -> None:
        """Create the adapter.

        Args:
            config: Remote store configuration.
            client: Optional pre-built S3 client; built from ``config`` when
                omitted.
        """
        self._config = config
        self._client = client if client is not None else create_s3_client(config)

    @property
    def bucket(self) -> str:
        return self._config.bucket

    async def upload(self, source: str | PathLike[str] | BinaryIO, object_name: str) -> str:
        """Transfer a local file or binary stream to ``object_name``.

        Args:
            source: Local file path or readable binary file object.
            object_name: Destination key in the bucket.

        Returns:
            Access URL of the uploaded object.

        Raises:
            TarpipeIOError: If the local source cannot be read.
            TarpipeTransportError: On network or backend faults.
            TarpipeAuthError: On credential or permission faults.
        """
        if isinstance(source, (str, PathLike)):
            transfer = partial(
                self._client.upload_file, str(Path(source)), self.bucket, object_name
            )
        else:
            transfer = partial(self._client.upload_fileobj, source, self.bucket, object_name)
        await self._call(transfer)
        return self.object_url(object_name)

    def download(
        self, object_name: str, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> "RemoteDownloadStage":
        """Return a source stage streaming the bytes of ``object_name``.

        The stage fails with ``TarpipeNotFoundError`` when the object is
        absent and ``TarpipeTransportError`` on other backend faults.
        """
        return RemoteDownloadStage(self, object_name, chunk_size)

    async def exists(self, object_name: str) -> bool:
        """Return whether ``object_name`` exists; missing objects are not errors.

        Raises:
            TarpipeTransportError: On backend faults other than not-found,
                credential faults included.
        """
        try:
            await self._call(
                partial(self._client.head_object, Bucket=self.bucket, Key=object_name)
            )
        except TarpipeNotFoundError:
            return False
        return True

    async def remove(self, object_name: str) -> None:
        """Delete ``object_name`` from the bucket.

        Raises:
            TarpipeTransportError: If the backend call fails.
        """
        await self._call(
            partial(self._client.delete_object, Bucket=self.bucket, Key=object_name)
        )

    async def open_object(self, object_name: str) -> Any:
        """Start a ``get_object`` call and return the streaming body."""
        response = await self._call(
            partial(self._client.get_object, Bucket=self.bucket, Key=object_name)
        )
        return response["Body"]

    def object_url(self, object_name: str) -> str:
        """Build the access URL for ``object_name``."""
        key = quote(object_name)
        if self._config.public_url:
            return f"{self._config.public_url.rstrip('/')}/{key}"
        endpoint = self._client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket}/{key}"

    async def _call(self, operation: partial) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, operation)
        except TarpipeError:
            raise
        except OSError as error:
            raise as_tarpipe_error(error) from error
        except Exception as error:
            raise classify_remote_error(error) from error


class RemoteDownloadStage(SourceStage):
    """Source stage streaming a remote object body."""

    name = REMOTE_DOWNLOAD_STAGE

    def __init__(self, store: RemoteStore, object_name: str, chunk_size: int) -> None:
        self._store = store
        self._object_name = object_name
        self._chunk_size = chunk_size

    async def run(self, inbound: StageChannel | None, outbound: StageChannel | None) -> None:
        loop = asyncio.get_running_loop()
        body = await self._store.open_object(self._object_name)
        try:
            while True:
                try:
                    chunk = await loop.run_in_executor(None, body.read, self._chunk_size)
                except TarpipeError:
                    raise
                except Exception as error:
                    raise classify_remote_error(error) from error
                if not chunk:
                    return
                await outbound.send(chunk)
        finally:
            await loop.run_in_executor(None, body.close)
