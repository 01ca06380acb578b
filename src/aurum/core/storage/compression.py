"""Gzip helpers for stored blobs."""

import gzip
from enum import Enum

from .base import StorageError

GZIP_SUFFIX = ".gz"

# Payloads that are already compressed gain nothing from gzip
_PRECOMPRESSED_MARKERS = ("image/", "video/", "audio/", "zip", "gzip")


class CompressionType(Enum):
    NONE = "none"
    GZIP = "gzip"


def compression_for(content_type: str) -> CompressionType:
    """Pick the codec for a payload of the given MIME type."""
    if any(marker in content_type for marker in _PRECOMPRESSED_MARKERS):
        return CompressionType.NONE
    return CompressionType.GZIP


def compress_bytes(data: bytes, compression: CompressionType = CompressionType.GZIP) -> bytes:
    if compression is CompressionType.GZIP:
        return gzip.compress(data, compresslevel=6)
    return data


def decompress_bytes(data: bytes, compression: CompressionType = CompressionType.GZIP) -> bytes:
    """Undo ``compress_bytes``.

    Raises:
        StorageError: If a gzip payload is truncated or corrupt.
    """
    if compression is not CompressionType.GZIP:
        return data
    try:
        return gzip.decompress(data)
    except (OSError, EOFError) as e:
        raise StorageError(f"Corrupt gzip payload: {e}") from e
