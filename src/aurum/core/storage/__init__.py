"""
Storage backends for aurum.

Async key-value blob storage with optional gzip compression, behind a
pluggable backend interface (local filesystem by default).
"""

from .base import (
    StorageBackend,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
)
from .compression import CompressionType, compress_bytes, compression_for, decompress_bytes
from .local import LocalStorage

__all__ = [
    "CompressionType",
    "LocalStorage",
    "StorageBackend",
    "StorageError",
    "StorageKeyError",
    "StoragePermissionError",
    "compress_bytes",
    "compression_for",
    "decompress_bytes",
]
