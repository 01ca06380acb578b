"""Holdings extraction from investment-app screenshots.

The image is sent to a multimodal model together with a fixed instruction
describing the target schema.  Whatever comes back is validated record by
record; a response that cannot be understood yields an empty list.  Only a
failure of the call itself raises ``ExtractionError``.
"""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Any

import aiofiles
from loguru import logger
from pydantic import ValidationError

from aurum.core.exceptions import ExtractionError
from aurum.core.llm import LLMClient, extract_json_payload
from aurum.portfolio.models import ExtractedAsset

from .schemas import ExtractedAssetPayload

EXTRACTION_PROMPT = """\
这是一张投资类 APP 的持仓截图。请识别其中所有可见的持仓，并以 JSON 对象返回，格式为：
{"assets": [{"name": ..., "category": ..., "amount": ..., "returnRate": ..., "currency": ...}]}

字段要求：
- name：产品名称。
- category：根据产品类型选择以下英文枚举之一：Stock（股票）、Fund（基金）、Bond（债券）、\
Crypto（数字货币）、Cash（现金）、Other（其他）。
- amount：该持仓的总市值（数字）。
- returnRate：收益率的百分比数值，可为负数，例如 +5.5% 记为 5.5。
- currency：货币代码，例如 CNY、USD；根据截图中的货币符号判断，无法判断时为 CNY。

只返回 JSON，不要附加任何说明。"""

_WRAPPER_KEYS = ("assets", "holdings", "items", "positions", "data")

_IMAGE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


def sniff_image_mime(data: bytes, default: str = "image/jpeg") -> str:
    """Guess an image MIME type from its magic bytes."""
    for signature, mime in _IMAGE_SIGNATURES:
        if data.startswith(signature):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return default


def build_image_part(image: bytes, mime_type: str | None = None) -> dict[str, Any]:
    """Encode raw image bytes as an OpenAI-style ``image_url`` content part."""
    mime = mime_type or sniff_image_mime(image)
    encoded = base64.b64encode(image).decode("ascii")
    return {"type": "image_url", "image_url": {"url": f"data:{mime};base64,{encoded}"}}


def parse_extraction_response(text: str) -> list[ExtractedAsset]:
    """Turn the model's reply into extracted records.

    Accepts a bare JSON array, or an object wrapping one under a key like
    ``assets``.  Unparseable replies and invalid items are dropped with a
    warning; this never raises.
    """
    try:
        payload = extract_json_payload(text)
    except ValueError as e:
        logger.warning(f"Failed to parse extraction response: {e}")
        return []

    if isinstance(payload, dict):
        wrapped = next((payload[k] for k in _WRAPPER_KEYS if isinstance(payload.get(k), list)), None)
        if wrapped is not None:
            payload = wrapped
        elif "name" in payload:
            payload = [payload]

    if not isinstance(payload, list):
        logger.warning(f"Extraction response is not a list (got {type(payload).__name__})")
        return []

    records: list[ExtractedAsset] = []
    for item in payload:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object extraction item: {item!r:.100}")
            continue
        try:
            records.append(ExtractedAssetPayload.model_validate(item).to_record())
        except ValidationError as e:
            logger.warning(f"Skipping invalid extraction item {item!r:.100}: {e}")
    return records


class ExtractionService:
    """Extract holdings records from screenshots via an LLM."""

    def __init__(self, client: LLMClient, prompt: str = EXTRACTION_PROMPT):
        self.client = client
        self.prompt = prompt

    async def extract(self, image: bytes, mime_type: str | None = None) -> list[ExtractedAsset]:
        """Extract holdings from raw image bytes.

        Returns:
            Extracted records; empty when nothing usable came back.

        Raises:
            ExtractionError: If the image is empty or the model call fails.
        """
        if not image:
            raise ExtractionError("Image payload is empty")

        content = [build_image_part(image, mime_type), {"type": "text", "text": self.prompt}]

        try:
            text = await self.client.aprompt(content, json_mode=True)
        except Exception as e:
            logger.error(f"Extraction call failed ({type(e).__name__}): {e}")
            raise ExtractionError(f"Screenshot extraction failed: {e}") from e

        if not text:
            logger.warning("Extraction model returned no text")
            return []

        records = parse_extraction_response(text)
        logger.info(f"Extracted {len(records)} holdings from screenshot ({len(image)} bytes)")
        return records

    async def extract_file(self, path: str | Path) -> list[ExtractedAsset]:
        """Read an image file and extract holdings from it."""
        try:
            async with aiofiles.open(Path(path).expanduser(), "rb") as f:
                image = await f.read()
        except OSError as e:
            raise ExtractionError(f"Cannot read image {path}: {e}") from e
        return await self.extract(image)
