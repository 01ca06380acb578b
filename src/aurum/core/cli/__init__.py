"""Aurum CLI: entry point for upload, analyze, and the dashboard views."""

import click

from aurum import __version__

from .common import CliContext


@click.group()
@click.version_option(version=__version__, package_name="aurum")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (YAML or JSON). Defaults to ~/.aurum/config.yaml.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Aurum: AI-assisted personal wealth tracking."""
    ctx.obj = CliContext(config_path=config_path, verbose=verbose)


# Register subcommands
from .analyze_cmd import analyze
from .show_cmd import dashboard, history, holdings
from .upload_cmd import upload

main.add_command(upload)
main.add_command(analyze)
main.add_command(dashboard)
main.add_command(holdings)
main.add_command(history)
