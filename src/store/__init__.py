"""Remote storage layer.

This module transports tarballs to and from an S3-compatible object store
and exposes the public tarball SDK built on the streaming pipeline.
"""
