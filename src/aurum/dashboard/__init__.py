"""Dashboard: the application controller and the views it feeds."""

from .controller import Notice, NoticeLevel, PortfolioState, WealthController
from .views import TrendMetric, analysis_preview, holdings_rows, trend_series

__all__ = [
    "Notice",
    "NoticeLevel",
    "PortfolioState",
    "TrendMetric",
    "WealthController",
    "analysis_preview",
    "holdings_rows",
    "trend_series",
]
