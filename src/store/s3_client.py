"""S3 client construction.

This module encapsulates boto3 session and client creation from the
remote store configuration.
"""

from __future__ import annotations

from typing import Any

import boto3

from core.config import RemoteStoreConfig


def create_s3_client(config: RemoteStoreConfig) -> Any:
    """Create a boto3 S3 client for the configured backend.

    Args:
        config: Remote store config with optional session settings.

    Returns:
        Boto3 S3 client.
    """
    session_kwargs: dict[str, str] = {}
    if config.profile:
        session_kwargs["profile_name"] = config.profile
    if config.region:
        session_kwargs["region_name"] = config.region
    if config.access_key_id and config.secret_access_key:
        session_kwargs["aws_access_key_id"] = config.access_key_id
        session_kwargs["aws_secret_access_key"] = config.secret_access_key
    if config.session_token:
        session_kwargs["aws_session_token"] = config.session_token
    session = boto3.session.Session(**session_kwargs)
    if config.endpoint_url:
        return session.client("s3", endpoint_url=config.endpoint_url)
    return session.client("s3")
