"""View models for the dashboard.

Plain data shaped for display: the trend chart series, the allocation
slices, holdings table rows, and analysis excerpts.  Nothing here formats
for a specific output; ``render`` does that.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from aurum.portfolio.metrics import AllocationSlice, allocation_breakdown
from aurum.portfolio.models import AnalysisResult, Asset, HistoryPoint

PREVIEW_LENGTH = 80

__all__ = [
    "PREVIEW_LENGTH",
    "AllocationSlice",
    "HoldingRow",
    "TrendMetric",
    "TrendPoint",
    "allocation_breakdown",
    "analysis_preview",
    "analysis_sections",
    "holdings_rows",
    "trend_series",
]


class TrendMetric(StrEnum):
    """Which value the trend chart plots."""

    NET_WORTH = "net-worth"
    RETURN_RATE = "return-rate"

    @property
    def label(self) -> str:
        return "总净值" if self is TrendMetric.NET_WORTH else "收益率"


@dataclass(frozen=True)
class TrendPoint:
    date: date
    value: float


@dataclass(frozen=True)
class HoldingRow:
    name: str
    category_label: str
    amount: float
    currency: str
    return_rate: float
    updated_on: date

    @property
    def signed_return_rate(self) -> str:
        sign = "+" if self.return_rate > 0 else ""
        return f"{sign}{self.return_rate:g}%"


def trend_series(history: Sequence[HistoryPoint], metric: TrendMetric = TrendMetric.NET_WORTH) -> list[TrendPoint]:
    """History as chart points, oldest first."""
    ordered = sorted(history, key=lambda p: p.date)
    if metric is TrendMetric.NET_WORTH:
        return [TrendPoint(p.date, p.total_net_worth) for p in ordered]
    return [TrendPoint(p.date, p.total_return_rate) for p in ordered]


def holdings_rows(assets: Sequence[Asset]) -> list[HoldingRow]:
    return [
        HoldingRow(
            name=a.name,
            category_label=a.category.label,
            amount=a.amount,
            currency=a.currency,
            return_rate=a.return_rate,
            updated_on=a.last_updated.date(),
        )
        for a in assets
    ]


def analysis_preview(analysis: AnalysisResult | None, limit: int = PREVIEW_LENGTH) -> str | None:
    """Short excerpt of the investment advice for the summary view."""
    if analysis is None:
        return None
    advice = analysis.investment_advice.strip()
    if len(advice) <= limit:
        return advice
    return advice[:limit].rstrip() + "..."


def analysis_sections(analysis: AnalysisResult) -> list[tuple[str, str]]:
    """The full analysis as (heading, body) pairs for the detail view."""
    return [
        ("资产配置分析", analysis.asset_allocation_analysis),
        ("投资理财建议", analysis.investment_advice),
        ("持仓调整建议", analysis.adjustment_suggestions),
    ]
