"""tarpipe CLI entry points.
This module exposes pack, unpack and remote transfer commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Sequence

from core.config import RemoteStoreConfig
from core.errors import TarpipeError
from core.types import DownloadPaths
from store.tarball_sdk import TarClient

_LOCAL_COMMANDS = ("pack", "unpack")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="tarpipe", description="tarpipe tarball CLI")
    parser.add_argument("--bucket", help="Override TARPIPE_BUCKET for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_pack_command(subparsers)
    _add_unpack_command(subparsers)
    _add_upload_command(subparsers)
    _add_download_command(subparsers)
    _add_exists_command(subparsers)
    _add_remove_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tarpipe CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args)
        return asyncio.run(_dispatch(client, args))
    except TarpipeError as error:
        print(f"tarpipe {args.command} failed: {error}", file=sys.stderr)
        return 1


def _build_client(args: argparse.Namespace) -> TarClient:
    """Build SDK client; remote commands also load the store config.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured SDK client.
    """
    if args.command in _LOCAL_COMMANDS:
        return TarClient()
    return TarClient(RemoteStoreConfig.from_env(bucket=args.bucket))


async def _dispatch(client: TarClient, args: argparse.Namespace) -> int:
    if args.command == "pack":
        await client.pack(args.source, args.target)
        return 0
    if args.command == "unpack":
        await client.unpack(args.tarball, args.directory)
        return 0
    if args.command == "upload":
        print(await client.upload(args.name, args.file))
        return 0
    if args.command == "download":
        result = await client.download(args.name, DownloadPaths(tarball=args.tarball))
        print(result.path)
        return 0
    if args.command == "exists":
        found = await client.exists(args.name)
        print("true" if found else "false")
        return 0
    await client.remove(args.name)
    return 0


def _add_pack_command(subparsers: Any) -> None:
    """Register pack subcommand."""
    parser = subparsers.add_parser("pack", help="Archive and gzip a directory into a file")
    parser.add_argument("source", help="Directory to archive")
    parser.add_argument("target", help="Tarball path to write")


def _add_unpack_command(subparsers: Any) -> None:
    """Register unpack subcommand."""
    parser = subparsers.add_parser("unpack", help="Extract a gzipped tarball into a directory")
    parser.add_argument("tarball", help="Tarball path to read")
    parser.add_argument("directory", help="Directory to extract into")


def _add_upload_command(subparsers: Any) -> None:
    """Register upload subcommand."""
    parser = subparsers.add_parser("upload", help="Upload a tarball to the bucket")
    parser.add_argument("name", help="Object name in the bucket")
    parser.add_argument("file", help="Local tarball path")


def _add_download_command(subparsers: Any) -> None:
    """Register download subcommand."""
    parser = subparsers.add_parser("download", help="Download a tarball from the bucket")
    parser.add_argument("name", help="Object name in the bucket")
    parser.add_argument("tarball", help="Local path to write")


def _add_exists_command(subparsers: Any) -> None:
    """Register exists subcommand."""
    parser = subparsers.add_parser("exists", help="Check whether a tarball exists in the bucket")
    parser.add_argument("name", help="Object name in the bucket")


def _add_remove_command(subparsers: Any) -> None:
    """Register remove subcommand."""
    parser = subparsers.add_parser("remove", help="Delete a tarball from the bucket")
    parser.add_argument("name", help="Object name in the bucket")
