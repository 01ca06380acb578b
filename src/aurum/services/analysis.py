"""AI wealth analysis of the current holdings."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger
from pydantic import ValidationError

from aurum.core.exceptions import AnalysisError
from aurum.core.llm import LLMClient, extract_json_payload, safe_get_content
from aurum.portfolio.models import AnalysisResult, Asset

from .schemas import AnalysisPayload

ANALYST_SYSTEM_PROMPT = "你是一位服务高净值客户的资深财富管理顾问，擅长资产配置与风险控制。"

ANALYSIS_PROMPT_TEMPLATE = """\
以下是客户当前的投资持仓：
{summary}

请用中文撰写一份专业的分析报告，以 JSON 对象返回，包含三个字段：
1. assetAllocationAnalysis：资产配置分析，评估分散程度与风险敞口。
2. investmentAdvice：投资理财建议，结合市场环境给出整体建议。
3. adjustmentSuggestions：持仓调整建议，给出可执行的具体调整方向。

语气专业、克制、有深度。只返回 JSON。"""


def format_amount(value: float) -> str:
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def build_assets_summary(assets: Sequence[Asset]) -> str:
    """One line per holding: name, localized category, amount, return rate."""
    return "\n".join(
        f"- {a.name}（{a.category.label}）：{format_amount(a.amount)} {a.currency}，收益率：{a.return_rate:g}%"
        for a in assets
    )


def parse_analysis_response(text: str) -> AnalysisResult:
    """Validate the model's reply into an ``AnalysisResult``.

    Raises:
        AnalysisError: If the reply is empty, not JSON, or missing a section.
    """
    if not text or not text.strip():
        raise AnalysisError("No analysis generated")
    try:
        payload = extract_json_payload(text)
        return AnalysisPayload.model_validate(payload).to_result()
    except (ValueError, ValidationError) as e:
        raise AnalysisError(f"Unusable analysis response: {e}") from e


class AnalysisService:
    """Produce narrative analysis of a portfolio via an LLM."""

    def __init__(self, client: LLMClient, prompt_template: str = ANALYSIS_PROMPT_TEMPLATE):
        self.client = client
        self.prompt_template = prompt_template

    async def analyze(self, assets: Sequence[Asset]) -> AnalysisResult:
        """Analyze the holdings.

        Raises:
            AnalysisError: On any failure; the caller keeps its prior analysis.
        """
        messages = [
            {"role": "system", "content": self.client.system_prompt or ANALYST_SYSTEM_PROMPT},
            {"role": "user", "content": self.prompt_template.format(summary=build_assets_summary(assets))},
        ]

        try:
            response = await self.client.acompletion(messages, json_mode=True)
        except Exception as e:
            logger.error(f"Analysis call failed ({type(e).__name__}): {e}")
            raise AnalysisError(f"Wealth analysis failed: {e}") from e

        result = parse_analysis_response(safe_get_content(response))
        logger.info(f"Generated analysis for {len(assets)} holdings")
        return result
