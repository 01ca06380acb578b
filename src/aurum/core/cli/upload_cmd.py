"""aurum upload — extract holdings from a screenshot."""

from __future__ import annotations

import asyncio

import click

from .common import CliContext, prepare


@click.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def upload(ctx: CliContext, image: str) -> None:
    """Upload a holdings screenshot and update your portfolio."""
    from aurum.dashboard.controller import NoticeLevel
    from aurum.dashboard.render import render_holdings, render_notice, render_summary
    from aurum.dashboard.views import holdings_rows

    controller = prepare(ctx)

    async def _run():
        await controller.load()
        with ctx.console.status("处理中..."):
            return await controller.upload_screenshot_file(image)

    notice = asyncio.run(_run())
    render_notice(ctx.console, notice)
    if notice.level is NoticeLevel.ERROR:
        raise SystemExit(1)

    render_summary(ctx.console, controller.metrics)
    render_holdings(ctx.console, holdings_rows(controller.state.assets))
