"""Holdings reconciliation and history-point updates.

Extracted records are merged into the holdings list by exact display name:
a match is updated in place, a miss is appended as a new asset.  The
net-worth history keeps at most one point per calendar day.

Both functions return new lists and leave their inputs untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime

from loguru import logger

from .metrics import PortfolioMetrics, compute_metrics
from .models import DEFAULT_CURRENCY, Asset, AssetCategory, ExtractedAsset, HistoryPoint, new_asset_id, utc_now


@dataclass
class MergeReport:
    """What a reconciliation pass did, for logging and user feedback."""

    updated: int = 0
    inserted: int = 0
    skipped: int = 0


def merge_extracted_assets(
    assets: Sequence[Asset],
    extracted: Sequence[ExtractedAsset],
    *,
    now: datetime | None = None,
    id_factory: Callable[[], str] = new_asset_id,
    default_currency: str = DEFAULT_CURRENCY,
    report: MergeReport | None = None,
) -> list[Asset]:
    """Merge extracted records into the holdings list.

    Records without a name are skipped.  The first asset whose name equals
    the record's name (case-sensitive) is updated: every field the record
    provides is overwritten, the id is kept, and ``last_updated`` is set to
    ``now``.  Otherwise a new asset is appended with a fresh id and
    defaults for the missing fields.

    Args:
        assets: Current holdings, in display order.
        extracted: Partial records from screenshot extraction.
        now: Timestamp written to touched assets. Defaults to current UTC time.
        id_factory: Generates ids for new assets.
        default_currency: Currency for new assets that don't specify one.
        report: Optional counters, filled in place.

    Returns:
        A new list: existing order preserved, new assets appended in
        processing order.
    """
    timestamp = now or utc_now()
    merged = list(assets)
    report = report if report is not None else MergeReport()

    for record in extracted:
        if not record.name:
            report.skipped += 1
            continue

        index = next((i for i, a in enumerate(merged) if a.name == record.name), None)
        if index is not None:
            merged[index] = _apply_record(merged[index], record, timestamp)
            report.updated += 1
        else:
            merged.append(
                Asset(
                    id=id_factory(),
                    name=record.name,
                    category=record.category or AssetCategory.OTHER,
                    amount=record.amount if record.amount is not None else 0.0,
                    return_rate=record.return_rate if record.return_rate is not None else 0.0,
                    currency=record.currency or default_currency,
                    last_updated=timestamp,
                )
            )
            report.inserted += 1

    logger.debug(
        f"Merged {len(extracted)} records: "
        f"{report.updated} updated, {report.inserted} inserted, {report.skipped} skipped"
    )
    return merged


def _apply_record(asset: Asset, record: ExtractedAsset, timestamp: datetime) -> Asset:
    changes = {
        "category": record.category,
        "amount": record.amount,
        "return_rate": record.return_rate,
        "currency": record.currency or None,
    }
    provided = {k: v for k, v in changes.items() if v is not None}
    return replace(asset, **provided, last_updated=timestamp)


def today_utc() -> date:
    return datetime.now(UTC).date()


def update_history(
    history: Sequence[HistoryPoint],
    metrics: PortfolioMetrics,
    today: date | None = None,
) -> list[HistoryPoint]:
    """Write today's snapshot into the history series.

    If a point for ``today`` exists it is replaced at the same position;
    otherwise a new point is appended.  Past days are never touched and
    the series is not reordered.
    """
    day = today or today_utc()
    point = HistoryPoint(
        date=day,
        total_net_worth=metrics.total_net_worth,
        total_return_rate=metrics.total_return_rate,
    )

    updated = list(history)
    for i, existing in enumerate(updated):
        if existing.date == day:
            updated[i] = point
            return updated
    updated.append(point)
    return updated


def legacy_history_snapshot(previous_assets: Sequence[Asset], extracted: Sequence[ExtractedAsset]) -> PortfolioMetrics:
    """Snapshot as the first dashboard release computed it.

    Net worth is the pre-merge total plus the raw sum of extracted amounts,
    and the return rate is the pre-merge rate.  Overstates net worth when
    a record updates an existing asset instead of inserting a new one.
    """
    before = compute_metrics(previous_assets)
    extracted_sum = sum(r.amount or 0.0 for r in extracted)
    return PortfolioMetrics(
        total_net_worth=before.total_net_worth + extracted_sum,
        total_return=before.total_return,
        total_return_rate=before.total_return_rate,
    )
