"""aurum dashboard / holdings / history — read-only views."""

from __future__ import annotations

import asyncio

import click

from aurum.dashboard.views import TrendMetric

from .common import CliContext, prepare

chart_option = click.option(
    "--chart",
    type=click.Choice([m.value for m in TrendMetric]),
    default=TrendMetric.NET_WORTH.value,
    show_default=True,
    help="Value plotted by the trend chart.",
)


@click.command()
@chart_option
@click.pass_obj
def dashboard(ctx: CliContext, chart: str) -> None:
    """Show net worth, trend, allocation, and the analysis preview."""
    from aurum.dashboard.render import render_allocation, render_analysis_preview, render_summary, render_trend
    from aurum.dashboard.views import allocation_breakdown, analysis_preview, trend_series

    controller = prepare(ctx)
    state = asyncio.run(controller.load())
    metric = TrendMetric(chart)

    render_summary(ctx.console, controller.metrics)
    render_trend(ctx.console, trend_series(state.history, metric), metric)
    render_allocation(ctx.console, allocation_breakdown(state.assets))
    render_analysis_preview(ctx.console, analysis_preview(state.analysis))


@click.command()
@click.pass_obj
def holdings(ctx: CliContext) -> None:
    """Show the holdings table and the full analysis."""
    from aurum.dashboard.render import render_analysis, render_holdings
    from aurum.dashboard.views import holdings_rows

    controller = prepare(ctx)
    state = asyncio.run(controller.load())

    render_holdings(ctx.console, holdings_rows(state.assets))
    render_analysis(ctx.console, state.analysis)


@click.command()
@chart_option
@click.pass_obj
def history(ctx: CliContext, chart: str) -> None:
    """Show the daily net-worth or return-rate history."""
    from aurum.dashboard.render import render_trend
    from aurum.dashboard.views import trend_series

    controller = prepare(ctx)
    state = asyncio.run(controller.load())
    metric = TrendMetric(chart)

    render_trend(ctx.console, trend_series(state.history, metric), metric)
