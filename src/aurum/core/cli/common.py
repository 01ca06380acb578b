"""Shared setup logic for CLI commands."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console

if TYPE_CHECKING:
    from aurum.core.config import Config
    from aurum.dashboard.controller import WealthController

AURUM_DIR = Path.home() / ".aurum"
CONFIG_PATH = AURUM_DIR / "config.yaml"


@dataclass
class CliContext:
    """Per-invocation state carried on ``click.Context.obj``."""

    config_path: str | None = None
    verbose: bool = False
    console: Console = field(default_factory=Console)


def load_config(config_path: str | None = None) -> Config:
    """Load config from an explicit path or ~/.aurum/config.yaml."""
    from aurum.core.config import Config

    return Config(config_file=config_path or str(CONFIG_PATH))


def configure_logging(config: Config, verbose: bool = False) -> None:
    from aurum.core.utils.logging import setup_logging

    settings = config.validated()
    log_file = settings.logging.file
    if log_file and settings.paths.log_dir and not os.path.isabs(os.path.expanduser(log_file)):
        log_file = str(settings.paths.log_dir / log_file)
    setup_logging(level="DEBUG" if verbose else settings.logging.level, log_file=log_file)


def set_api_key_env(config: Config) -> None:
    """Export ``llm.api_key`` to the provider's env var so litellm can find it."""
    from aurum.core.llm.config import PROVIDER_ENV_MAP, infer_provider

    api_key = config.get("llm.api_key", "")
    if not api_key:
        return

    provider = infer_provider(config.get("llm.model", ""))
    env_var = PROVIDER_ENV_MAP.get(provider)
    if env_var and env_var not in os.environ:
        os.environ[env_var] = api_key


def build_controller(config: Config) -> WealthController:
    """Wire storage, the two AI services, and the controller from config."""
    from aurum.core.llm import LLMClient
    from aurum.core.storage import LocalStorage
    from aurum.dashboard.controller import WealthController
    from aurum.portfolio.store import PortfolioStore
    from aurum.services.analysis import ANALYST_SYSTEM_PROMPT, AnalysisService
    from aurum.services.extraction import ExtractionService

    settings = config.validated()
    set_api_key_env(config)

    storage_dir = settings.paths.storage_dir or settings.paths.data_dir / "storage"
    store = PortfolioStore(
        LocalStorage(base_path=str(storage_dir)),
        key_prefix=settings.storage.key_prefix,
        compress=settings.storage.compress,
    )
    return WealthController(
        store=store,
        extraction=ExtractionService(LLMClient.from_config(config)),
        analysis=AnalysisService(LLMClient.from_config(config, system_prompt=ANALYST_SYSTEM_PROMPT)),
        default_currency=settings.portfolio.default_currency,
        legacy_snapshot=settings.history.legacy_snapshot,
    )


def prepare(ctx: CliContext) -> WealthController:
    """Load config, configure logging, and build the controller."""
    from aurum.core.exceptions import ConfigurationError

    try:
        config = load_config(ctx.config_path)
        configure_logging(config, ctx.verbose)
        return build_controller(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
