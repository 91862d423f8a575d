"""Streaming pipeline layer.

This module chains byte-stream stages (archive, compression, file and
remote I/O) and resolves each chain to a single success or failure.
"""
