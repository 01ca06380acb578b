"""
LLM provider defaults and output-token limits.

Both service clients need a vision-capable model; every default below
accepts image input through litellm.
"""

from typing import NamedTuple


class ProviderDefaults(NamedTuple):
    model: str
    max_output_tokens: int
    api_key_env: str | None


DEFAULT_PROVIDER = "gemini"

PROVIDERS: dict[str, ProviderDefaults] = {
    "gemini": ProviderDefaults("gemini/gemini-2.5-flash", 8_192, "GEMINI_API_KEY"),
    "openai": ProviderDefaults("gpt-4o-mini", 4_096, "OPENAI_API_KEY"),
    "anthropic": ProviderDefaults("anthropic/claude-sonnet-4-20250514", 4_096, "ANTHROPIC_API_KEY"),
    "local": ProviderDefaults("ollama/llava", 4_096, None),
}

PROVIDER_ENV_MAP: dict[str, str] = {
    name: defaults.api_key_env for name, defaults in PROVIDERS.items() if defaults.api_key_env
}

# Substring match against the model name; first hit wins.
MODEL_OUTPUT_TOKEN_LIMITS: dict[str, int] = {
    "gemini-2.5": 65_536,
    "gemini-2.0": 8_192,
    "gpt-4.1": 32_768,
    "gpt-4o": 16_384,
    "claude": 8_192,
    "llava": 4_096,
}

_MODEL_PREFIXES: dict[str, str] = {
    "gemini/": "gemini",
    "anthropic/": "anthropic",
    "openai/": "openai",
    "ollama/": "local",
}


def get_default_model(provider: str) -> str:
    """Default litellm model string for a provider (Gemini if unknown)."""
    return PROVIDERS.get(provider, PROVIDERS[DEFAULT_PROVIDER]).model


def get_model_max_tokens(model_name: str, provider: str | None = None) -> int:
    for key, limit in MODEL_OUTPUT_TOKEN_LIMITS.items():
        if key in model_name:
            return limit
    if provider in PROVIDERS:
        return PROVIDERS[provider].max_output_tokens
    return 4_096


def infer_provider(model_name: str) -> str:
    """Infer the provider from a litellm model string."""
    for prefix, provider in _MODEL_PREFIXES.items():
        if model_name.startswith(prefix):
            return provider
    lowered = model_name.lower()
    if "claude" in lowered:
        return "anthropic"
    if "gemini" in lowered:
        return "gemini"
    return "openai"
