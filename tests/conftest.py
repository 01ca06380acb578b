"""Shared test fixtures for aurum."""

import os
import tempfile
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def tmp_dir():
    """Scratch directory removed after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """config.yaml pointing every path into tmp_dir, with an OpenAI model."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
            "storage_dir": os.path.join(tmp_dir, "data", "storage"),
        },
        "llm": {
            "model": "gpt-4o",
            "temperature": 0.1,
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


def _make_response(content="Hello", prompt_tokens=10, completion_tokens=5):
    usage = MagicMock()
    usage.prompt_tokens = prompt_tokens
    usage.completion_tokens = completion_tokens
    msg = MagicMock()
    msg.content = content
    choice = MagicMock()
    choice.message = msg
    resp = MagicMock(choices=[choice])
    resp.usage = usage
    return resp


@pytest.fixture
def make_response():
    """Factory for mock litellm responses."""
    return _make_response
