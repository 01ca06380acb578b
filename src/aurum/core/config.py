"""
Layered configuration for aurum.

Sources, lowest to highest precedence:
    1. Built-in defaults
    2. Caller-supplied defaults
    3. The config file (YAML or JSON)
    4. Environment variables, ``AURUM_SECTION__KEY``

Example:
    config = Config(config_file="~/.aurum/config.yaml")
    config.get("llm.model")
    config.validated().history.legacy_snapshot

Values read from the environment stay strings; ``validated()`` coerces
them to their declared types.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

import yaml

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .config_schema import AurumConfig

ENV_PREFIX = "AURUM_"
DEFAULT_DATA_DIR = os.path.join("~", ".aurum-data")


def _builtin_defaults(data_dir: str) -> dict[str, Any]:
    return {
        "paths": {"data_dir": data_dir, "storage_dir": None, "log_dir": None},
        "llm": {
            "model": "gemini/gemini-2.5-flash",
            "fallback_model": None,
            "api_key": "",
            "temperature": 0.2,
            "timeout": 120,
        },
        "storage": {"key_prefix": "aurum_", "compress": False},
        "portfolio": {"default_currency": "CNY"},
        "history": {"legacy_snapshot": False},
        "logging": {"level": "WARNING", "file": None},
    }


def deep_merge(target: dict, source: dict) -> dict:
    """Merge ``source`` into ``target`` in place; nested dicts merge key by key."""
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            deep_merge(existing, value)
        else:
            target[key] = value
    return target


def read_config_file(path: str) -> dict[str, Any]:
    """Parse a YAML or JSON file. Other extensions contribute nothing."""
    suffix = os.path.splitext(path)[1].lower()
    if suffix not in (".yaml", ".yml", ".json"):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Nested dict built from ``PREFIX_SECTION__KEY=value`` variables."""
    overrides: dict[str, Any] = {}
    if not prefix:
        return overrides
    for name, value in (os.environ if environ is None else environ).items():
        if not name.startswith(prefix):
            continue
        *parents, leaf = name[len(prefix) :].lower().split("__")
        node = overrides
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value
    return overrides


class Config:
    """
    Merged configuration with dot-path access.

    Args:
        config_file: YAML or JSON file; a missing file is ignored.
        env_prefix: Prefix for environment overrides. Empty disables them.
        data_dir: Base data directory, ``~/.aurum-data`` by default.
        defaults: Extra defaults layered over the built-in ones.
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.env_prefix = env_prefix or ""

        data = _builtin_defaults(os.path.expanduser(data_dir or DEFAULT_DATA_DIR))
        deep_merge(data, defaults or {})
        if self.config_file and os.path.exists(self.config_file):
            deep_merge(data, read_config_file(self.config_file))
        deep_merge(data, env_overrides(self.env_prefix))
        self.config_data = data
        self._fill_paths()

    def _fill_paths(self) -> None:
        # storage and log dirs follow data_dir unless set explicitly
        paths = self.config_data.setdefault("paths", {})
        base = os.path.expanduser(paths.get("data_dir") or DEFAULT_DATA_DIR)
        paths["data_dir"] = base
        paths["storage_dir"] = paths.get("storage_dir") or os.path.join(base, "storage")
        paths["log_dir"] = paths.get("log_dir") or os.path.join(base, "logs")

    def get(self, key_path: str, default: Any = None) -> Any:
        """Look up ``"section.key"``; ``default`` when any part is missing."""
        node: Any = self.config_data
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key_path: str, value: Any) -> None:
        *parents, leaf = key_path.split(".")
        node = self.config_data
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def validated(self) -> AurumConfig:
        """The configuration as a typed ``AurumConfig``.

        Raises:
            ConfigurationError: If a value fails validation.
        """
        from pydantic import ValidationError

        from .config_schema import AurumConfig

        try:
            return AurumConfig.model_validate(self.config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
