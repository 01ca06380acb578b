"""Derived portfolio metrics.

Pure functions over the holdings list, recomputed on every call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import Asset, AssetCategory


@dataclass(frozen=True)
class PortfolioMetrics:
    total_net_worth: float = 0.0
    total_return: float = 0.0
    total_return_rate: float = 0.0


@dataclass(frozen=True)
class AllocationSlice:
    """Aggregate holding value for one category."""

    category: AssetCategory
    amount: float
    share: float

    @property
    def label(self) -> str:
        return self.category.label


def compute_metrics(assets: Sequence[Asset]) -> PortfolioMetrics:
    """Net worth, absolute return, and amount-weighted return rate.

    The weighted rate is defined as 0 when net worth is 0.
    """
    total_net_worth = sum(a.amount for a in assets)
    total_return = sum(a.absolute_return for a in assets)
    total_return_rate = (total_return / total_net_worth) * 100 if total_net_worth > 0 else 0.0
    return PortfolioMetrics(
        total_net_worth=total_net_worth,
        total_return=total_return,
        total_return_rate=total_return_rate,
    )


def allocation_breakdown(assets: Sequence[Asset]) -> list[AllocationSlice]:
    """Group holdings by category, in the order categories first appear."""
    totals: dict[AssetCategory, float] = {}
    for asset in assets:
        totals[asset.category] = totals.get(asset.category, 0.0) + asset.amount

    grand_total = sum(totals.values())
    return [
        AllocationSlice(
            category=category,
            amount=amount,
            share=amount / grand_total if grand_total > 0 else 0.0,
        )
        for category, amount in totals.items()
    ]
