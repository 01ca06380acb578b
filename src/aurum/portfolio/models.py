"""Portfolio data models.

Holdings, daily net-worth snapshots, and the AI narrative analysis.
``to_dict``/``from_dict`` use the camelCase keys of the persisted JSON
blobs so data saved by earlier versions of the dashboard loads unchanged.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum
from typing import Any

DEFAULT_CURRENCY = "CNY"


class AssetCategory(StrEnum):
    STOCK = "Stock"
    FUND = "Fund"
    BOND = "Bond"
    CRYPTO = "Crypto"
    CASH = "Cash"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> AssetCategory:
        """Map a raw value onto the enum; anything unrecognised becomes OTHER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            cleaned = value.strip()
            for member in cls:
                if cleaned.lower() == member.value.lower():
                    return member
        return cls.OTHER

    @property
    def label(self) -> str:
        """Localized display label."""
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[AssetCategory, str] = {
    AssetCategory.STOCK: "股票",
    AssetCategory.FUND: "基金",
    AssetCategory.BOND: "债券",
    AssetCategory.CRYPTO: "数字货币",
    AssetCategory.CASH: "现金",
    AssetCategory.OTHER: "其他",
}


def new_asset_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        # JavaScript's toISOString() ends in "Z"
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return utc_now()


def _format_timestamp(value: datetime) -> str:
    if value.utcoffset() == timedelta(0):
        return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    return value.isoformat()


@dataclass
class Asset:
    """A single tracked holding.

    Attributes:
        id: Opaque unique identifier.
        name: Display name; also the merge key for reconciliation.
        category: One of AssetCategory.
        amount: Current total value, never negative.
        return_rate: Signed percentage, e.g. 5.5 for +5.5%.
        currency: Currency code, e.g. "CNY", "USD".
        last_updated: When the holding was last written by reconciliation.
    """

    id: str
    name: str
    category: AssetCategory = AssetCategory.OTHER
    amount: float = 0.0
    return_rate: float = 0.0
    currency: str = DEFAULT_CURRENCY
    last_updated: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Asset name cannot be empty")
        self.category = AssetCategory.parse(self.category)
        self.amount = float(self.amount)
        self.return_rate = float(self.return_rate)
        if self.amount < 0:
            raise ValueError(f"Asset {self.name} has negative amount: {self.amount}")

    @property
    def absolute_return(self) -> float:
        """Return in currency units implied by the percentage rate."""
        return self.amount * (self.return_rate / 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "amount": self.amount,
            "returnRate": self.return_rate,
            "currency": self.currency,
            "lastUpdated": _format_timestamp(self.last_updated),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Asset:
        return cls(
            id=str(data.get("id") or new_asset_id()),
            name=data.get("name", ""),
            category=AssetCategory.parse(data.get("category")),
            amount=data.get("amount") or 0.0,
            return_rate=data.get("returnRate") or 0.0,
            currency=data.get("currency") or DEFAULT_CURRENCY,
            last_updated=_parse_timestamp(data.get("lastUpdated")),
        )


@dataclass(frozen=True)
class ExtractedAsset:
    """A partial holding record produced by screenshot extraction.

    ``None`` means the field was not present in the extraction result.
    """

    name: str | None = None
    category: AssetCategory | None = None
    amount: float | None = None
    return_rate: float | None = None
    currency: str | None = None


@dataclass
class HistoryPoint:
    """Net worth and weighted return rate on one calendar day."""

    date: date
    total_net_worth: float
    total_return_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "totalNetWorth": self.total_net_worth,
            "totalReturnRate": self.total_return_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryPoint:
        raw_date = data["date"]
        if isinstance(raw_date, str):
            # Day granularity; full ISO timestamps are truncated
            raw_date = date.fromisoformat(raw_date[:10])
        return cls(
            date=raw_date,
            total_net_worth=float(data.get("totalNetWorth") or 0.0),
            total_return_rate=float(data.get("totalReturnRate") or 0.0),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """AI-generated narrative about the portfolio."""

    asset_allocation_analysis: str
    investment_advice: str
    adjustment_suggestions: str

    def to_dict(self) -> dict[str, str]:
        return {
            "assetAllocationAnalysis": self.asset_allocation_analysis,
            "investmentAdvice": self.investment_advice,
            "adjustmentSuggestions": self.adjustment_suggestions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        return cls(
            asset_allocation_analysis=str(data["assetAllocationAnalysis"]),
            investment_advice=str(data["investmentAdvice"]),
            adjustment_suggestions=str(data["adjustmentSuggestions"]),
        )
