"""
Storage backend interface.

Backends keep opaque byte blobs under relative, slash-separated keys.
Callers decide the encoding; a backend only optionally gzips on the way in.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """A backend could not complete a read or write."""


class StorageKeyError(StorageError, KeyError):
    """No blob is stored under the key."""


class StoragePermissionError(StorageError):
    """Raised for unsafe keys and for files the process may not touch."""


class StorageBackend(ABC):
    """Async key-value blob store."""

    @abstractmethod
    async def save(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        compress: bool = False,
    ) -> None:
        """Write ``data`` under ``key``, replacing any previous blob."""

    @abstractmethod
    async def load(self, key: str) -> bytes:
        """Return the blob for ``key``. Raises StorageKeyError if absent."""
