"""Helpers for reading LLM replies."""

import json
import re
from typing import Any

from loguru import logger

_CODE_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def safe_get_content(response: Any, default: str = "") -> str:
    """Text of the first choice, or ``default`` for a malformed response."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        logger.warning("LLM response has no message content; returning default")
        return default
    if content is None:
        return default
    return extract_text_from_response(content)


def extract_text_from_response(content: Any) -> str:
    """Flatten message content to plain text.

    litellm normalises replies to the OpenAI shape, so ``content`` is usually
    a string.  Some providers return a list of typed blocks instead; the text
    blocks are joined and ``thinking`` blocks dropped.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(_block_text(block) for block in content)
    return getattr(content, "text", None) or str(content)


def _block_text(block: Any) -> str:
    if isinstance(block, str):
        return block
    if isinstance(block, dict):
        if block.get("type") == "thinking":
            return ""
        return str(block.get("text", ""))
    return str(getattr(block, "text", "") or "")


def extract_json_payload(text: str) -> Any:
    """Parse a JSON document out of model output.

    Accepts bare JSON or JSON wrapped in a markdown code fence.

    Raises:
        ValueError: If no JSON document can be parsed.
    """
    if not text or not text.strip():
        raise ValueError("Empty response text")

    candidate = text.strip()
    match = _CODE_FENCE_RE.match(candidate)
    if match:
        candidate = match.group(1).strip()

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Response is not valid JSON: {e}") from e
