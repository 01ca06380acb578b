"""Tests for aurum.core.config_schema and Config.validated()."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from aurum.core.config import Config
from aurum.core.config_schema import AurumConfig, LLMConfig
from aurum.core.exceptions import ConfigurationError



@pytest.mark.smoke
class TestConfigSchema:
    def test_defaults_validate(self, tmp_dir):
        cfg = Config(data_dir=tmp_dir).validated()
        assert isinstance(cfg, AurumConfig)
        assert cfg.paths.data_dir == Path(tmp_dir)
        assert cfg.paths.storage_dir == Path(tmp_dir) / "storage"
        assert cfg.llm.fallback_model is None
        assert cfg.storage.compress is False
        assert cfg.logging.level == "WARNING"

    def test_paths_expand_user(self):
        cfg = AurumConfig.model_validate({"paths": {"data_dir": "~/wealth"}})
        assert cfg.paths.data_dir == Path.home() / "wealth"

    def test_env_strings_are_coerced(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("AURUM_LLM__TEMPERATURE", "0.7")
        monkeypatch.setenv("AURUM_STORAGE__COMPRESS", "1")
        cfg = Config(data_dir=tmp_dir).validated()
        assert cfg.llm.temperature == pytest.approx(0.7)
        assert cfg.storage.compress is True

    def test_blank_fallback_model_is_none(self):
        assert LLMConfig(fallback_model="  ").fallback_model is None
        assert LLMConfig(fallback_model="gpt-4o").fallback_model == "gpt-4o"

    def test_unknown_sections_are_kept(self):
        cfg = AurumConfig.model_validate({"paths": {"data_dir": "/tmp/x"}, "custom": {"a": 1}})
        assert cfg.model_extra["custom"] == {"a": 1}

    def test_invalid_value_raises_validation_error(self):
        with pytest.raises(ValidationError):
            AurumConfig.model_validate({"paths": {"data_dir": "/tmp/x"}, "llm": {"timeout": "soon"}})

    def test_validated_wraps_errors(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("llm.temperature", "warm")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            config.validated()
