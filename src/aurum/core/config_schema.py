"""Pydantic models for config validation.

``Config.validated()`` turns the merged config dict into a typed
``AurumConfig``.  Env-var overrides arrive as strings; pydantic's lax mode
coerces them (``"true"`` -> ``True``, ``"0.5"`` -> ``0.5``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    storage_dir: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "storage_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class LLMConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    model: str = "gemini/gemini-2.5-flash"
    fallback_model: str | None = None
    api_key: str = ""
    temperature: float = 0.2
    timeout: int = 120
    max_tokens: int | None = None

    @field_validator("fallback_model", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StorageConfig(BaseModel):
    key_prefix: str = "aurum_"
    compress: bool = False


class PortfolioConfig(BaseModel):
    default_currency: str = "CNY"


class HistoryConfig(BaseModel):
    """History snapshot behaviour.

    ``legacy_snapshot`` reproduces the original approximation: pre-merge
    total plus the raw sum of extracted amounts.
    """

    legacy_snapshot: bool = False


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    file: str | None = None


class AurumConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so custom sections survive validation.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.aurum-data"))
    llm: LLMConfig = LLMConfig()
    storage: StorageConfig = StorageConfig()
    portfolio: PortfolioConfig = PortfolioConfig()
    history: HistoryConfig = HistoryConfig()
    logging: LoggingConfig = LoggingConfig()
