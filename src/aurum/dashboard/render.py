"""Terminal rendering of the dashboard views with rich."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from aurum.portfolio.metrics import AllocationSlice, PortfolioMetrics
from aurum.portfolio.models import AnalysisResult

from .controller import Notice, NoticeLevel
from .views import HoldingRow, TrendMetric, TrendPoint, analysis_sections

_NOTICE_STYLES = {
    NoticeLevel.INFO: "cyan",
    NoticeLevel.SUCCESS: "green",
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.ERROR: "bold red",
}

_BAR_WIDTH = 30


def _money(value: float) -> str:
    return f"¥{value:,.2f}"


def _rate_style(value: float) -> str:
    return "green" if value >= 0 else "red"


def render_notice(console: Console, notice: Notice) -> None:
    console.print(f"[{_NOTICE_STYLES[notice.level]}]{notice.message}[/]")


def render_summary(console: Console, metrics: PortfolioMetrics) -> None:
    """Net worth and weighted return cards."""
    rate_style = _rate_style(metrics.total_return_rate)
    net_worth = (
        f"[bold]{_money(metrics.total_net_worth)}[/bold]\n"
        f"[{_rate_style(metrics.total_return)}]{metrics.total_return:+,.0f} 累计盈亏[/]"
    )
    rate = f"[bold {rate_style}]{metrics.total_return_rate:.2f}%[/]\n[dim]加权组合收益[/dim]"
    grid = Table.grid(expand=True, padding=(0, 2))
    grid.add_column(ratio=1)
    grid.add_column(ratio=1)
    grid.add_row(Panel(net_worth, title="总资产净值"), Panel(rate, title="累计收益率"))
    console.print(grid)


def render_trend(console: Console, points: Sequence[TrendPoint], metric: TrendMetric) -> None:
    """Trend as a table with proportional bars."""
    if not points:
        console.print("[dim]暂无历史数据。[/dim]")
        return

    table = Table(title=f"财富走势 · {metric.label}", expand=False)
    table.add_column("日期")
    table.add_column(metric.label, justify="right")
    table.add_column("")

    peak = max(abs(p.value) for p in points) or 1.0
    for p in points:
        value = _money(p.value) if metric is TrendMetric.NET_WORTH else f"{p.value:.2f}%"
        bar = "█" * max(1, round(abs(p.value) / peak * _BAR_WIDTH)) if p.value else ""
        style = "yellow" if p.value >= 0 else "red"
        table.add_row(p.date.isoformat(), value, f"[{style}]{bar}[/]")
    console.print(table)


def render_allocation(console: Console, slices: Sequence[AllocationSlice]) -> None:
    if not slices:
        console.print("[dim]暂无资产配置数据。[/dim]")
        return
    table = Table(title="资产配置")
    table.add_column("类别")
    table.add_column("金额", justify="right")
    table.add_column("占比", justify="right")
    for s in slices:
        table.add_row(s.label, _money(s.amount), f"{s.share:.1%}")
    console.print(table)


def render_holdings(console: Console, rows: Sequence[HoldingRow]) -> None:
    if not rows:
        console.print("[dim]暂无持仓信息，请上传投资 APP 截图。[/dim]")
        return

    table = Table(title="持仓明细")
    table.add_column("资产名称")
    table.add_column("类别")
    table.add_column("金额", justify="right")
    table.add_column("收益率", justify="right")
    table.add_column("更新时间", justify="right")

    for row in rows:
        table.add_row(
            escape(row.name),
            row.category_label,
            f"{row.amount:,.2f} [dim]{escape(row.currency)}[/dim]",
            f"[{_rate_style(row.return_rate)}]{row.signed_return_rate}[/]",
            row.updated_on.isoformat(),
        )
    console.print(table)


def render_analysis_preview(console: Console, preview: str | None) -> None:
    if preview is None:
        return
    console.print(Panel(f"[italic]“{escape(preview)}”[/italic]\n\n[dim]aurum holdings 查看完整报告[/dim]", title="AI 财富洞察"))


def render_analysis(console: Console, analysis: AnalysisResult | None) -> None:
    if analysis is None:
        console.print("[dim]尚未生成 AI 分析，运行 aurum analyze。[/dim]")
        return
    for heading, body in analysis_sections(analysis):
        console.print(Panel(escape(body), title=heading, title_align="left"))
