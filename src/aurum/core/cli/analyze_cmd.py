"""aurum analyze — AI analysis of the current holdings."""

from __future__ import annotations

import asyncio

import click

from .common import CliContext, prepare


@click.command()
@click.pass_obj
def analyze(ctx: CliContext) -> None:
    """Generate an AI wealth analysis of your holdings."""
    from aurum.dashboard.controller import NoticeLevel
    from aurum.dashboard.render import render_analysis, render_notice

    controller = prepare(ctx)

    async def _run():
        await controller.load()
        with ctx.console.status("智能分析中..."):
            return await controller.run_analysis()

    notice = asyncio.run(_run())
    render_notice(ctx.console, notice)
    if notice.level is NoticeLevel.ERROR:
        raise SystemExit(1)
    if not notice.ok:
        return

    render_analysis(ctx.console, controller.state.analysis)
