"""Application controller — owns the portfolio state and runs user actions.

Every user-triggered action (screenshot upload, analysis request) goes
through ``WealthController``.  Actions are serialised by busy flags: starting
one while the same kind is in flight raises ``OperationInProgressError``
instead of queueing.  Service failures never escape as exceptions; they
come back as a ``Notice`` and leave the state exactly as it was.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from pathlib import Path

from loguru import logger

from aurum.core.exceptions import AnalysisError, ExtractionError, OperationInProgressError
from aurum.portfolio.metrics import PortfolioMetrics, compute_metrics
from aurum.portfolio.models import DEFAULT_CURRENCY, AnalysisResult, Asset, ExtractedAsset, HistoryPoint, utc_now
from aurum.portfolio.reconcile import MergeReport, legacy_history_snapshot, merge_extracted_assets, update_history
from aurum.portfolio.store import PortfolioStore
from aurum.services.analysis import AnalysisService
from aurum.services.extraction import ExtractionService

MSG_UPLOAD_SUCCESS = "截图解析成功，您的持仓已更新。"
MSG_UPLOAD_FAILED = "截图解析失败，请确保图片清晰并重试。"
MSG_ANALYSIS_SUCCESS = "AI 财富分析已生成。"
MSG_ANALYSIS_FAILED = "AI 分析生成失败，请稍后重试。"
MSG_ANALYSIS_NO_ASSETS = "请先添加资产后再运行分析。"


class NoticeLevel(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A user-facing message produced by an action."""

    level: NoticeLevel
    message: str

    @property
    def ok(self) -> bool:
        return self.level in (NoticeLevel.INFO, NoticeLevel.SUCCESS)


@dataclass
class PortfolioState:
    """The single in-memory owner of holdings, history, and analysis."""

    assets: list[Asset] = field(default_factory=list)
    history: list[HistoryPoint] = field(default_factory=list)
    analysis: AnalysisResult | None = None
    is_uploading: bool = False
    is_analyzing: bool = False


class WealthController:
    """Runs uploads and analyses against a ``PortfolioState``.

    Args:
        store: Persistence for the three collections.
        extraction: Screenshot extraction client.
        analysis: Wealth analysis client.
        state: Initial state; normally filled by ``load()``.
        default_currency: Currency for newly inserted assets.
        legacy_snapshot: Write history with the pre-merge approximation.
        clock: Returns the current time; injectable for tests.
    """

    def __init__(
        self,
        store: PortfolioStore,
        extraction: ExtractionService,
        analysis: AnalysisService,
        state: PortfolioState | None = None,
        *,
        default_currency: str = DEFAULT_CURRENCY,
        legacy_snapshot: bool = False,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.extraction = extraction
        self.analysis = analysis
        self.state = state or PortfolioState()
        self.default_currency = default_currency
        self.legacy_snapshot = legacy_snapshot
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock() if self._clock is not None else utc_now()

    def _today(self) -> date:
        return self._now().date()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> PortfolioState:
        """Replace the in-memory collections with what storage holds."""
        snapshot = await self.store.load()
        self.state.assets = snapshot.assets
        self.state.history = snapshot.history
        self.state.analysis = snapshot.analysis
        logger.debug(
            f"Loaded {len(snapshot.assets)} assets, {len(snapshot.history)} history points, "
            f"analysis={'yes' if snapshot.analysis else 'no'}"
        )
        return self.state

    @property
    def metrics(self) -> PortfolioMetrics:
        """Derived metrics, recomputed from the holdings on every access."""
        return compute_metrics(self.state.assets)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def upload_screenshot(self, image: bytes, mime_type: str | None = None) -> Notice:
        """Extract holdings from a screenshot and reconcile them."""
        return await self._run_upload(lambda: self.extraction.extract(image, mime_type))

    async def upload_screenshot_file(self, path: str | Path) -> Notice:
        return await self._run_upload(lambda: self.extraction.extract_file(path))

    async def _run_upload(self, extract: Callable[[], Awaitable[list[ExtractedAsset]]]) -> Notice:
        if self.state.is_uploading:
            raise OperationInProgressError("A screenshot is already being processed")

        self.state.is_uploading = True
        try:
            try:
                extracted = await extract()
            except ExtractionError as e:
                logger.error(f"Upload failed: {e}")
                return Notice(NoticeLevel.ERROR, MSG_UPLOAD_FAILED)

            if not extracted:
                logger.warning("Extraction returned no holdings; updating today's snapshot only")
            await self.apply_extracted(extracted)
            return Notice(NoticeLevel.SUCCESS, MSG_UPLOAD_SUCCESS)
        finally:
            self.state.is_uploading = False

    async def apply_extracted(self, extracted: list[ExtractedAsset]) -> MergeReport:
        """Reconcile extracted records into holdings and write today's history point."""
        previous = self.state.assets
        report = MergeReport()
        merged = merge_extracted_assets(
            previous,
            extracted,
            now=self._now(),
            default_currency=self.default_currency,
            report=report,
        )

        if self.legacy_snapshot:
            snapshot = legacy_history_snapshot(previous, extracted)
        else:
            snapshot = compute_metrics(merged)

        self.state.assets = merged
        self.state.history = update_history(self.state.history, snapshot, today=self._today())

        logger.info(
            f"Reconciled screenshot: {report.updated} updated, {report.inserted} added, "
            f"{report.skipped} skipped; net worth {snapshot.total_net_worth:,.2f}"
        )

        await self.store.save_assets(self.state.assets)
        await self.store.save_history(self.state.history)
        return report

    async def run_analysis(self) -> Notice:
        """Ask the analysis service about the current holdings."""
        if not self.state.assets:
            return Notice(NoticeLevel.WARNING, MSG_ANALYSIS_NO_ASSETS)
        if self.state.is_analyzing:
            raise OperationInProgressError("An analysis is already running")

        self.state.is_analyzing = True
        try:
            try:
                result = await self.analysis.analyze(list(self.state.assets))
            except AnalysisError as e:
                logger.error(f"Analysis failed: {e}")
                return Notice(NoticeLevel.ERROR, MSG_ANALYSIS_FAILED)

            self.state.analysis = result
            await self.store.save_analysis(result)
            return Notice(NoticeLevel.SUCCESS, MSG_ANALYSIS_SUCCESS)
        finally:
            self.state.is_analyzing = False
