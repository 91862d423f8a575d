"""Runtime configuration model for tarpipe.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.errors import TarpipeConfigError


@dataclass(frozen=True)
class RemoteStoreConfig:
    """Validated remote object store configuration.

    Attributes:
        bucket: Bucket holding the tarballs.
        region: Optional AWS region for the S3 session.
        profile: Optional AWS profile for boto3 session initialization.
        endpoint_url: Optional S3-compatible endpoint override.
        access_key_id: Optional explicit access key.
        secret_access_key: Optional explicit secret key.
        session_token: Optional temporary session token.
        public_url: Optional base URL used to build object access URLs.
    """

    bucket: str
    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    public_url: str | None = None

    def __post_init__(self) -> None:
        if not self.bucket:
            raise TarpipeConfigError(
                "Remote store bucket is empty. Set TARPIPE_BUCKET or pass a bucket name."
            )
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise TarpipeConfigError(
                "Access key id and secret access key must be provided together."
            )

    @classmethod
    def from_env(cls, bucket: str | None = None) -> "RemoteStoreConfig":
        """Build config from process environment variables.

        Args:
            bucket: Optional bucket overriding ``TARPIPE_BUCKET``.

        Returns:
            A validated config object.

        Raises:
            TarpipeConfigError: If environment values are invalid.
        """
        return cls(
            bucket=bucket or os.getenv("TARPIPE_BUCKET", ""),
            region=os.getenv("TARPIPE_S3_REGION"),
            profile=os.getenv("TARPIPE_S3_PROFILE"),
            endpoint_url=os.getenv("TARPIPE_S3_ENDPOINT_URL"),
            access_key_id=os.getenv("TARPIPE_S3_ACCESS_KEY_ID"),
            secret_access_key=os.getenv("TARPIPE_S3_SECRET_ACCESS_KEY"),
            session_token=os.getenv("TARPIPE_S3_SESSION_TOKEN"),
            public_url=os.getenv("TARPIPE_PUBLIC_URL"),
        )
