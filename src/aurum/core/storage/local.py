"""
Local filesystem storage backend.

Each key maps to one file under ``base_path``; gzip-compressed blobs carry
an extra ``.gz`` suffix.  Writes land in a hidden temporary sibling first
and are renamed into place, so a crash never leaves a half-written blob.
"""

from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from .base import StorageBackend, StorageKeyError, StoragePermissionError
from .compression import GZIP_SUFFIX, CompressionType, compress_bytes, compression_for, decompress_bytes


def _gz(path: Path) -> Path:
    return path.with_name(path.name + GZIP_SUFFIX)


class LocalStorage(StorageBackend):
    """Blob store rooted at a local directory."""

    def __init__(self, base_path: str | Path = "~/.aurum-data/storage"):
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        """Map a key to its uncompressed path, rejecting anything outside ``base_path``."""
        cleaned = key.strip()
        if not cleaned:
            raise StoragePermissionError("Storage key cannot be empty")
        if "\x00" in cleaned or "\\" in cleaned:
            raise StoragePermissionError(f"Storage key contains an illegal character: {key!r}")
        if cleaned.startswith(("/", "~")):
            raise StoragePermissionError(f"Storage key must be relative: {key!r}")

        path = (self.base_path / cleaned).resolve()
        if not path.is_relative_to(self.base_path):
            raise StoragePermissionError(f"Storage key escapes the storage root: {key!r}")
        return path

    def _locate(self, key: str) -> tuple[Path, CompressionType] | None:
        path = self._resolve(key)
        if path.is_file():
            return path, CompressionType.NONE
        if _gz(path).is_file():
            return _gz(path), CompressionType.GZIP
        return None

    async def save(
        self,
        key: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        compress: bool = False,
    ) -> None:
        plain = self._resolve(key)
        compression = compression_for(content_type) if compress else CompressionType.NONE
        target, stale = (_gz(plain), plain) if compression is CompressionType.GZIP else (plain, _gz(plain))

        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.tmp")
        try:
            async with aiofiles.open(tmp, "wb") as f:
                await f.write(compress_bytes(data, compression))
            await aiofiles.os.replace(tmp, target)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write {target}: {e}") from e
        finally:
            if tmp.exists():
                tmp.unlink()

        if stale.exists():
            await aiofiles.os.remove(stale)

        logger.debug(f"Stored '{key}' ({len(data)} bytes, {compression.value})")

    async def load(self, key: str) -> bytes:
        found = self._locate(key)
        if found is None:
            raise StorageKeyError(f"Key not found: {key}")

        path, compression = found
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        return decompress_bytes(data, compression)
