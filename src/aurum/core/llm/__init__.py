"""
LLM client and helpers, powered by LiteLLM.
"""

from .client import LLMClient
from .config import (
    MODEL_OUTPUT_TOKEN_LIMITS,
    PROVIDER_ENV_MAP,
    PROVIDERS,
    get_default_model,
    get_model_max_tokens,
    infer_provider,
)
from .utils import extract_json_payload, extract_text_from_response, safe_get_content

__all__ = [
    "MODEL_OUTPUT_TOKEN_LIMITS",
    "PROVIDERS",
    "PROVIDER_ENV_MAP",
    "LLMClient",
    "extract_json_payload",
    "extract_text_from_response",
    "get_default_model",
    "get_model_max_tokens",
    "infer_provider",
    "safe_get_content",
]
