"""
LLM client shared by the extraction and analysis services.

A single-shot async completion over litellm, which routes to Gemini,
OpenAI, Anthropic or a local Ollama model from the model string alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from .config import DEFAULT_PROVIDER, get_default_model, get_model_max_tokens, infer_provider
from .utils import safe_get_content

if TYPE_CHECKING:
    from aurum.core.config import Config

# A message "content" is either plain text or a list of multimodal parts.
MessageContent = str | list[dict[str, Any]]


class LLMClient:
    """
    Multi-provider completion client backed by LiteLLM.

    Model names follow litellm conventions, e.g. ``"gemini/gemini-2.5-flash"``,
    ``"gpt-4o"``, ``"anthropic/claude-sonnet-4-20250514"``, ``"ollama/llava"``.
    When ``fallback_model`` is set, a rate-limit, API or connection error on
    the primary model is retried once against it.
    """

    def __init__(
        self,
        model: str | None = None,
        provider: str | None = None,
        system_prompt: str | None = None,
        temperature: float = 0.2,
        max_tokens: int | None = None,
        timeout: int = 120,
        num_retries: int = 2,
        fallback_model: str | None = None,
        fallback_provider: str | None = None,
    ):
        self.provider = provider or (infer_provider(model) if model else DEFAULT_PROVIDER)
        self.model = model or get_default_model(self.provider)
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.timeout = timeout
        self.num_retries = num_retries

        self.fallback_model = fallback_model
        self.fallback_provider = fallback_provider or (infer_provider(fallback_model) if fallback_model else None)

        limit = get_model_max_tokens(self.model, self.provider)
        if max_tokens is not None and max_tokens > limit:
            logger.warning(f"max_tokens ({max_tokens}) exceeds the {self.model} limit ({limit}); capping")
        self.max_tokens = min(max_tokens or limit, limit)

        logger.debug(f"LLMClient: model={self.model} max_tokens={self.max_tokens} fallback={self.fallback_model}")

    @classmethod
    def from_config(cls, config: Config, system_prompt: str | None = None) -> LLMClient:
        """Build a client from the ``llm`` config section."""
        llm = config.validated().llm
        return cls(
            model=llm.model,
            system_prompt=system_prompt,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
            timeout=llm.timeout,
            fallback_model=llm.fallback_model,
        )

    async def acompletion(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str | None = None,
        json_mode: bool = False,
    ) -> Any:
        """Run one completion and return the raw litellm response.

        Args:
            messages: Full messages list (system + user).
            model: Optional per-request model override.
            json_mode: Ask the provider for a JSON object response.
        """
        import litellm

        request = self._request(messages, model or self.model, json_mode)
        try:
            return await litellm.acompletion(**request)
        except (litellm.RateLimitError, litellm.APIError, litellm.APIConnectionError) as e:
            if not self.fallback_model:
                raise
            logger.warning(
                f"{request['model']} failed ({type(e).__name__}); retrying with {self.fallback_model}"
            )
            fallback = self._request(messages, self.fallback_model, json_mode)
            return await litellm.acompletion(**fallback)

    async def aprompt(self, content: MessageContent, *, json_mode: bool = False) -> str:
        """Send one user turn (text or multimodal parts) and return the reply text."""
        messages: list[dict[str, Any]] = []
        if self.system_prompt and self.system_prompt.strip():
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": content})

        response = await self.acompletion(messages, json_mode=json_mode)
        return safe_get_content(response)

    def _request(self, messages: list[dict[str, Any]], model: str, json_mode: bool) -> dict[str, Any]:
        """litellm kwargs for ``model``, with max_tokens capped to what it supports."""
        if model == self.model:
            provider = self.provider
        elif model == self.fallback_model and self.fallback_provider:
            provider = self.fallback_provider
        else:
            provider = infer_provider(model)
        request: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": min(self.max_tokens, get_model_max_tokens(model, provider)),
            "timeout": self.timeout,
            "num_retries": self.num_retries,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}
        return request
