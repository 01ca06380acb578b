"""Holdings, history, and the reconciliation logic that keeps them current."""

from .metrics import AllocationSlice, PortfolioMetrics, allocation_breakdown, compute_metrics
from .models import (
    CATEGORY_LABELS,
    DEFAULT_CURRENCY,
    AnalysisResult,
    Asset,
    AssetCategory,
    ExtractedAsset,
    HistoryPoint,
)
from .reconcile import MergeReport, legacy_history_snapshot, merge_extracted_assets, update_history
from .store import PortfolioSnapshot, PortfolioStore

__all__ = [
    "CATEGORY_LABELS",
    "DEFAULT_CURRENCY",
    "AllocationSlice",
    "AnalysisResult",
    "Asset",
    "AssetCategory",
    "ExtractedAsset",
    "HistoryPoint",
    "MergeReport",
    "PortfolioMetrics",
    "PortfolioSnapshot",
    "PortfolioStore",
    "allocation_breakdown",
    "compute_metrics",
    "legacy_history_snapshot",
    "merge_extracted_assets",
    "update_history",
]
