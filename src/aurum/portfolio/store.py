"""Portfolio persistence on top of a key-value ``StorageBackend``.

Three independent JSON blobs: ``assets``, ``history``, and ``analysis``.
Reads happen once at startup; each collection is written on its own after
it changes.  There is no transaction across the three keys.

Records that fail to decode are skipped one at a time.  Before a blob that
did not load cleanly can be overwritten, its original bytes are copied to
an ``<name>.unreadable-<timestamp>.json`` key.  When that copy fails, or
the blob could not be read at all, the collection is left untouched on
disk until the next successful ``load``.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from loguru import logger

from aurum.core.exceptions import PortfolioDataError
from aurum.core.storage import StorageBackend, StorageError, StorageKeyError

from .models import AnalysisResult, Asset, HistoryPoint, utc_now

ASSETS_KEY = "assets"
HISTORY_KEY = "history"
ANALYSIS_KEY = "analysis"

T = TypeVar("T")


@dataclass
class PortfolioSnapshot:
    """Everything read back from storage at startup."""

    assets: list[Asset] = field(default_factory=list)
    history: list[HistoryPoint] = field(default_factory=list)
    analysis: AnalysisResult | None = None


class PortfolioStore:
    """Load and save the portfolio collections as JSON blobs."""

    def __init__(self, backend: StorageBackend, key_prefix: str = "aurum_", compress: bool = False):
        self.backend = backend
        self.key_prefix = key_prefix
        self.compress = compress
        # Collections whose stored blob must not be overwritten
        self._protected: set[str] = set()

    def storage_key(self, name: str) -> str:
        return f"{self.key_prefix}{name}.json"

    def backup_key(self, name: str) -> str:
        return f"{self.key_prefix}{name}.unreadable-{utc_now():%Y%m%dT%H%M%S}.json"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def load(self) -> PortfolioSnapshot:
        """Read all three collections.

        Missing keys yield empty defaults.  Invalid records are dropped and
        a blob that cannot be read or decoded is treated as missing.
        """
        self._protected.clear()
        assets = await self._load_optional(ASSETS_KEY, lambda raw: _decode_list(raw, Asset.from_dict))
        history = await self._load_optional(HISTORY_KEY, lambda raw: _decode_list(raw, HistoryPoint.from_dict))
        analysis = await self._load_optional(ANALYSIS_KEY, _decode_analysis)
        return PortfolioSnapshot(
            assets=assets or [],
            history=history or [],
            analysis=analysis,
        )

    async def _load_optional(self, name: str, decode: Callable[[Any], tuple[T, int]]) -> T | None:
        key = self.storage_key(name)
        try:
            data = await self.backend.load(key)
        except StorageKeyError:
            return None
        except StorageError as e:
            logger.warning(f"Cannot read '{key}': {e}. Starting with an empty {name} collection.")
            self._protected.add(name)
            return None

        try:
            value, skipped = decode(json.loads(data.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, PortfolioDataError) as e:
            logger.warning(f"Ignoring malformed '{key}': {e}")
            await self._preserve(name, data)
            return None

        if skipped:
            logger.warning(f"Dropped {skipped} invalid record(s) from '{key}'")
            await self._preserve(name, data)
        return value

    async def _preserve(self, name: str, data: bytes) -> None:
        """Copy the original blob aside; protect it when the copy fails."""
        backup = self.backup_key(name)
        try:
            await self.backend.save(backup, data, content_type="application/json")
        except (StorageError, OSError) as e:
            logger.error(f"Cannot back up '{self.storage_key(name)}': {e}. It will not be overwritten.")
            self._protected.add(name)
            return
        logger.warning(f"Original '{self.storage_key(name)}' kept as '{backup}'")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save_assets(self, assets: Sequence[Asset]) -> bool:
        return await self._save(ASSETS_KEY, [a.to_dict() for a in assets])

    async def save_history(self, history: Sequence[HistoryPoint]) -> bool:
        return await self._save(HISTORY_KEY, [p.to_dict() for p in history])

    async def save_analysis(self, analysis: AnalysisResult | None) -> bool:
        if analysis is None:
            return False
        return await self._save(ANALYSIS_KEY, analysis.to_dict())

    async def _save(self, name: str, payload: Any) -> bool:
        """Write one blob. Failures are logged and reported as ``False``."""
        key = self.storage_key(name)
        if name in self._protected:
            logger.error(f"Not writing '{key}': the stored copy could not be read or backed up")
            return False

        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        try:
            await self.backend.save(key, data, content_type="application/json", compress=self.compress)
        except (StorageError, OSError) as e:
            logger.error(f"Failed to persist '{key}': {e}")
            return False
        logger.debug(f"Persisted '{key}' ({len(data)} bytes)")
        return True


def _decode_list(raw: Any, decode_item: Callable[[dict[str, Any]], T]) -> tuple[list[T], int]:
    """Decode each record on its own; returns the good ones and how many were dropped."""
    if not isinstance(raw, list):
        raise PortfolioDataError(f"Expected a JSON array, got {type(raw).__name__}")
    items: list[T] = []
    for index, item in enumerate(raw):
        try:
            items.append(decode_item(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping invalid record #{index}: {e}")
    return items, len(raw) - len(items)


def _decode_analysis(raw: Any) -> tuple[AnalysisResult, int]:
    if not isinstance(raw, dict):
        raise PortfolioDataError(f"Expected a JSON object, got {type(raw).__name__}")
    try:
        return AnalysisResult.from_dict(raw), 0
    except KeyError as e:
        raise PortfolioDataError(f"Analysis is missing field {e}") from e
