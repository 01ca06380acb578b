"""Pydantic models for validating raw LLM output.

Model responses are loosely shaped: numbers arrive as ``"+5.5%"`` or
``"¥12,000.00"``, categories in Chinese or English.  Everything is coerced
here so downstream code only sees typed ``ExtractedAsset`` /
``AnalysisResult`` values.
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from aurum.portfolio.models import CATEGORY_LABELS, AnalysisResult, AssetCategory, ExtractedAsset

_NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?")

# Minus and plus variants map to ASCII; digit group separators are dropped
_NUMBER_TRANSLATION = str.maketrans({"\u2212": "-", "\uff0d": "-", "\uff0b": "+", ",": None, "\uff0c": None, " ": None})

_CATEGORY_BY_LABEL: dict[str, AssetCategory] = {label: category for category, label in CATEGORY_LABELS.items()}
_CATEGORY_BY_LABEL.update(
    {
        "股": AssetCategory.STOCK,
        "理财": AssetCategory.FUND,
        "货币": AssetCategory.CASH,
        "加密货币": AssetCategory.CRYPTO,
    }
)

_CURRENCY_SYMBOLS: dict[str, str] = {
    "¥": "CNY",
    "￥": "CNY",
    "元": "CNY",
    "RMB": "CNY",
    "人民币": "CNY",
    "$": "USD",
    "US$": "USD",
    "美元": "USD",
    "HK$": "HKD",
    "港元": "HKD",
    "港币": "HKD",
    "€": "EUR",
    "£": "GBP",
}


def coerce_number(value: Any) -> float | None:
    """Best-effort conversion of a model-produced value to a float.

    Returns None when nothing numeric can be recovered.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_RE.search(unicodedata.normalize("NFKC", value).translate(_NUMBER_TRANSLATION))
        if not match:
            return None
        number = float(match.group())
        if "亿" in value:
            number *= 100_000_000
        elif "万" in value:
            number *= 10_000
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_category(value: Any) -> AssetCategory | None:
    if value is None:
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        if cleaned in _CATEGORY_BY_LABEL:
            return _CATEGORY_BY_LABEL[cleaned]
    return AssetCategory.parse(value)


def coerce_currency(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    return _CURRENCY_SYMBOLS.get(cleaned, _CURRENCY_SYMBOLS.get(cleaned.upper(), cleaned.upper()))


class ExtractedAssetPayload(BaseModel):
    """One holding as returned by the extraction model."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = None
    category: AssetCategory | None = None
    amount: float | None = None
    return_rate: float | None = Field(default=None, validation_alias=AliasChoices("returnRate", "return_rate"))
    currency: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _clean_name(cls, v: Any) -> Any:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("category", mode="before")
    @classmethod
    def _clean_category(cls, v: Any) -> Any:
        return coerce_category(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _clean_amount(cls, v: Any) -> Any:
        number = coerce_number(v)
        # Holdings values are never negative; treat as unreadable
        if number is not None and number < 0:
            return None
        return number

    @field_validator("return_rate", mode="before")
    @classmethod
    def _clean_return_rate(cls, v: Any) -> Any:
        return coerce_number(v)

    @field_validator("currency", mode="before")
    @classmethod
    def _clean_currency(cls, v: Any) -> Any:
        return coerce_currency(v)

    def to_record(self) -> ExtractedAsset:
        return ExtractedAsset(
            name=self.name,
            category=self.category,
            amount=self.amount,
            return_rate=self.return_rate,
            currency=self.currency,
        )


class AnalysisPayload(BaseModel):
    """The three narrative sections of a wealth analysis."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    asset_allocation_analysis: str = Field(
        min_length=1,
        validation_alias=AliasChoices("assetAllocationAnalysis", "asset_allocation_analysis"),
    )
    investment_advice: str = Field(
        min_length=1,
        validation_alias=AliasChoices("investmentAdvice", "investment_advice"),
    )
    adjustment_suggestions: str = Field(
        min_length=1,
        validation_alias=AliasChoices("adjustmentSuggestions", "adjustment_suggestions"),
    )

    def to_result(self) -> AnalysisResult:
        return AnalysisResult(
            asset_allocation_analysis=self.asset_allocation_analysis,
            investment_advice=self.investment_advice,
            adjustment_suggestions=self.adjustment_suggestions,
        )
