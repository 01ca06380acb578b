"""Tests for dashboard.views and the rich renderers."""

from datetime import UTC, date, datetime
from io import StringIO

import pytest
from rich.console import Console

from aurum.dashboard.controller import Notice, NoticeLevel
from aurum.dashboard.render import (
    render_allocation,
    render_analysis,
    render_analysis_preview,
    render_holdings,
    render_notice,
    render_summary,
    render_trend,
)
from aurum.dashboard.views import (
    PREVIEW_LENGTH,
    TrendMetric,
    TrendPoint,
    allocation_breakdown,
    analysis_preview,
    analysis_sections,
    holdings_rows,
    trend_series,
)
from aurum.portfolio.metrics import compute_metrics
from aurum.portfolio.models import AnalysisResult, Asset, AssetCategory, HistoryPoint

HISTORY = [
    HistoryPoint(date(2026, 3, 14), 300, 3),
    HistoryPoint(date(2026, 3, 12), 100, 1),
    HistoryPoint(date(2026, 3, 13), 200, -2),
]


def _assets():
    return [
        Asset(
            id="1",
            name="[bold]Fund A[/bold]",
            category=AssetCategory.FUND,
            amount=1000,
            return_rate=5.5,
            last_updated=datetime(2026, 3, 14, 8, 0, tzinfo=UTC),
        ),
        Asset(id="2", name="Stock X", category=AssetCategory.STOCK, amount=500, return_rate=-2),
    ]


class TestTrendSeries:
    def test_net_worth_sorted_by_date(self):
        points = trend_series(HISTORY)
        assert points == [
            TrendPoint(date(2026, 3, 12), 100),
            TrendPoint(date(2026, 3, 13), 200),
            TrendPoint(date(2026, 3, 14), 300),
        ]

    def test_return_rate(self):
        assert [p.value for p in trend_series(HISTORY, TrendMetric.RETURN_RATE)] == [1, -2, 3]

    def test_metric_labels(self):
        assert TrendMetric("net-worth").label == "总净值"
        assert TrendMetric.RETURN_RATE.label == "收益率"


class TestHoldingsRows:
    def test_rows(self):
        rows = holdings_rows(_assets())
        assert rows[0].category_label == "基金"
        assert rows[0].updated_on == date(2026, 3, 14)
        assert rows[0].signed_return_rate == "+5.5%"
        assert rows[1].signed_return_rate == "-2%"

    def test_zero_rate_has_no_sign(self):
        row = holdings_rows([Asset(id="z", name="Cash", amount=1)])[0]
        assert row.signed_return_rate == "0%"


class TestAnalysisPreview:
    def test_none(self):
        assert analysis_preview(None) is None

    def test_short_advice_unchanged(self):
        assert analysis_preview(AnalysisResult("a", "保持定投。", "c")) == "保持定投。"

    def test_long_advice_truncated(self):
        advice = "建" * (PREVIEW_LENGTH + 20)
        preview = analysis_preview(AnalysisResult("a", advice, "c"))
        assert preview == "建" * PREVIEW_LENGTH + "..."

    def test_custom_limit(self):
        assert analysis_preview(AnalysisResult("a", "abcdefghij", "c"), limit=4) == "abcd..."

    def test_sections(self):
        sections = analysis_sections(AnalysisResult("a", "b", "c"))
        assert [heading for heading, _ in sections] == ["资产配置分析", "投资理财建议", "持仓调整建议"]
        assert [body for _, body in sections] == ["a", "b", "c"]

    def test_allocation_reexported(self):
        assert [s.label for s in allocation_breakdown(_assets())] == ["基金", "股票"]


class TestRender:
    @pytest.fixture
    def console(self):
        return Console(file=StringIO(), width=120, color_system=None)

    def _output(self, console):
        return console.file.getvalue()

    def test_notice(self, console):
        render_notice(console, Notice(NoticeLevel.ERROR, "截图解析失败"))
        assert "截图解析失败" in self._output(console)

    def test_summary(self, console):
        render_summary(console, compute_metrics(_assets()))
        out = self._output(console)
        assert "¥1,500.00" in out
        assert "总资产净值" in out

    def test_trend(self, console):
        render_trend(console, trend_series(HISTORY), TrendMetric.NET_WORTH)
        out = self._output(console)
        assert "2026-03-12" in out
        assert "█" in out

    def test_trend_empty(self, console):
        render_trend(console, [], TrendMetric.RETURN_RATE)
        assert "暂无历史数据" in self._output(console)

    def test_allocation(self, console):
        render_allocation(console, allocation_breakdown(_assets()))
        out = self._output(console)
        assert "基金" in out
        assert "66.7%" in out

    def test_holdings_escapes_markup(self, console):
        render_holdings(console, holdings_rows(_assets()))
        out = self._output(console)
        assert "[bold]Fund A[/bold]" in out
        assert "+5.5%" in out

    def test_holdings_escapes_currency(self, console):
        asset = Asset(id="3", name="Bond B", amount=10, currency="[/]USD", last_updated=datetime(2026, 3, 14, tzinfo=UTC))
        render_holdings(console, holdings_rows([asset]))
        assert "[/]USD" in self._output(console)

    def test_holdings_empty(self, console):
        render_holdings(console, [])
        assert "暂无持仓信息" in self._output(console)

    def test_analysis(self, console):
        render_analysis(console, AnalysisResult("分散不足", "长期持有", "增配债券"))
        out = self._output(console)
        assert "持仓调整建议" in out
        assert "增配债券" in out

    def test_analysis_missing(self, console):
        render_analysis(console, None)
        assert "aurum analyze" in self._output(console)

    def test_preview_none_prints_nothing(self, console):
        render_analysis_preview(console, None)
        assert self._output(console) == ""
