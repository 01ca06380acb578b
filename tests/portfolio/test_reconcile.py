"""Tests for portfolio.reconcile — merging extracted records and history updates."""

import itertools
from datetime import UTC, date, datetime

import pytest

from aurum.portfolio.metrics import PortfolioMetrics, compute_metrics
from aurum.portfolio.models import Asset, AssetCategory, ExtractedAsset, HistoryPoint
from aurum.portfolio.reconcile import (
    MergeReport,
    legacy_history_snapshot,
    merge_extracted_assets,
    update_history,
)

EARLIER = datetime(2026, 1, 1, tzinfo=UTC)
NOW = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"new-{next(counter)}"


def _fund_a():
    return Asset(
        id="a1",
        name="Fund A",
        category=AssetCategory.FUND,
        amount=10_000,
        return_rate=5,
        currency="CNY",
        last_updated=EARLIER,
    )


class TestMergeExtractedAssets:
    def test_update_amount_only(self):
        merged = merge_extracted_assets([_fund_a()], [ExtractedAsset(name="Fund A", amount=12_000)], now=NOW)

        assert len(merged) == 1
        asset = merged[0]
        assert asset.id == "a1"
        assert asset.amount == 12_000
        assert asset.return_rate == 5
        assert asset.category is AssetCategory.FUND
        assert asset.currency == "CNY"
        assert asset.last_updated == NOW

    def test_matched_record_overwrites_every_provided_field(self):
        record = ExtractedAsset(
            name="Fund A",
            category=AssetCategory.BOND,
            amount=9_000,
            return_rate=-1.5,
            currency="USD",
        )
        asset = merge_extracted_assets([_fund_a()], [record], now=NOW)[0]
        assert (asset.id, asset.category, asset.amount, asset.return_rate, asset.currency) == (
            "a1",
            AssetCategory.BOND,
            9_000,
            -1.5,
            "USD",
        )

    def test_zero_values_are_provided_not_absent(self):
        asset = merge_extracted_assets([_fund_a()], [ExtractedAsset(name="Fund A", amount=0, return_rate=0)], now=NOW)[0]
        assert asset.amount == 0
        assert asset.return_rate == 0

    def test_insert_into_empty(self, id_factory):
        record = ExtractedAsset(name="Stock X", category=AssetCategory.STOCK, amount=5_000, return_rate=-2)
        merged = merge_extracted_assets([], [record], now=NOW, id_factory=id_factory)

        assert len(merged) == 1
        asset = merged[0]
        assert asset.id == "new-1"
        assert asset.category is AssetCategory.STOCK
        assert asset.amount == 5_000
        assert asset.return_rate == -2
        assert asset.currency == "CNY"
        assert asset.last_updated == NOW

    def test_insert_defaults(self, id_factory):
        asset = merge_extracted_assets([], [ExtractedAsset(name="Bare")], now=NOW, id_factory=id_factory)[0]
        assert asset.category is AssetCategory.OTHER
        assert asset.amount == 0
        assert asset.return_rate == 0
        assert asset.currency == "CNY"

    def test_insert_uses_configured_default_currency(self):
        asset = merge_extracted_assets([], [ExtractedAsset(name="Bare")], default_currency="HKD")[0]
        assert asset.currency == "HKD"

    def test_fresh_ids_are_unique(self):
        merged = merge_extracted_assets([], [ExtractedAsset(name="A"), ExtractedAsset(name="B")])
        assert merged[0].id != merged[1].id

    @pytest.mark.parametrize("name", [None, ""])
    def test_nameless_record_is_skipped(self, name):
        report = MergeReport()
        original = [_fund_a()]
        merged = merge_extracted_assets(original, [ExtractedAsset(name=name, amount=1)], now=NOW, report=report)
        assert merged == original
        assert report.skipped == 1

    def test_match_is_case_sensitive(self, id_factory):
        merged = merge_extracted_assets([_fund_a()], [ExtractedAsset(name="fund a", amount=1)], id_factory=id_factory)
        assert len(merged) == 2
        assert merged[0].amount == 10_000

    def test_duplicate_names_update_first_match_only(self):
        first = _fund_a()
        second = Asset(id="a2", name="Fund A", amount=1, last_updated=EARLIER)
        merged = merge_extracted_assets([first, second], [ExtractedAsset(name="Fund A", amount=7)], now=NOW)
        assert merged[0].amount == 7
        assert merged[1].amount == 1
        assert merged[1].last_updated == EARLIER

    def test_inserts_earlier_in_same_pass_are_match_candidates(self, id_factory):
        records = [
            ExtractedAsset(name="Stock X", amount=100),
            ExtractedAsset(name="Stock X", return_rate=3),
        ]
        report = MergeReport()
        merged = merge_extracted_assets([], records, id_factory=id_factory, report=report)
        assert len(merged) == 1
        assert merged[0].amount == 100
        assert merged[0].return_rate == 3
        assert (report.inserted, report.updated) == (1, 1)

    def test_order_preserved_and_inserts_appended(self, id_factory):
        existing = [
            Asset(id="1", name="One", amount=1),
            Asset(id="2", name="Two", amount=2),
        ]
        records = [
            ExtractedAsset(name="Three"),
            ExtractedAsset(name="Two", amount=20),
            ExtractedAsset(name="Four"),
        ]
        merged = merge_extracted_assets(existing, records, id_factory=id_factory)
        assert [a.name for a in merged] == ["One", "Two", "Three", "Four"]
        assert [a.id for a in merged] == ["1", "2", "new-1", "new-2"]

    def test_inputs_not_mutated(self):
        original = [_fund_a()]
        snapshot = [Asset(**vars(a)) for a in original]
        merge_extracted_assets(original, [ExtractedAsset(name="Fund A", amount=1), ExtractedAsset(name="B")], now=NOW)
        assert original == snapshot
        assert len(original) == 1

    def test_empty_extraction_returns_equal_list(self):
        original = [_fund_a()]
        merged = merge_extracted_assets(original, [])
        assert merged == original
        assert merged is not original


class TestUpdateHistory:
    def test_appends_new_day(self):
        history = [HistoryPoint(date(2026, 3, 13), 100, 1)]
        updated = update_history(history, PortfolioMetrics(200, 20, 10), today=date(2026, 3, 14))
        assert len(updated) == 2
        assert updated[-1] == HistoryPoint(date(2026, 3, 14), 200, 10)

    def test_replaces_same_day_in_place(self):
        history = [
            HistoryPoint(date(2026, 3, 12), 50, 0),
            HistoryPoint(date(2026, 3, 14), 100, 1),
            HistoryPoint(date(2026, 3, 13), 75, 0.5),
        ]
        updated = update_history(history, PortfolioMetrics(300, 30, 10), today=date(2026, 3, 14))
        assert len(updated) == 3
        assert updated[1] == HistoryPoint(date(2026, 3, 14), 300, 10)
        # Past points and their order are untouched
        assert updated[0] == history[0]
        assert updated[2] == history[2]

    def test_empty_history(self):
        updated = update_history([], PortfolioMetrics(0, 0, 0), today=date(2026, 3, 14))
        assert updated == [HistoryPoint(date(2026, 3, 14), 0, 0)]

    def test_input_not_mutated(self):
        history = [HistoryPoint(date(2026, 3, 14), 100, 1)]
        update_history(history, PortfolioMetrics(300, 30, 10), today=date(2026, 3, 14))
        assert history == [HistoryPoint(date(2026, 3, 14), 100, 1)]

    def test_defaults_to_utc_today(self):
        updated = update_history([], PortfolioMetrics(1, 0, 0))
        assert updated[0].date == datetime.now(UTC).date()


class TestEmptyUploadScenario:
    def test_history_records_current_net_worth(self):
        assets = [Asset(id="a", name="Only", amount=100, return_rate=10)]
        merged = merge_extracted_assets(assets, [])
        updated = update_history([], compute_metrics(merged), today=date(2026, 3, 14))
        assert merged == assets
        assert updated[0].total_net_worth == 100
        assert updated[0].total_return_rate == pytest.approx(10)


class TestLegacyHistorySnapshot:
    def test_adds_raw_extracted_sum_to_previous_total(self):
        previous = [_fund_a()]
        snapshot = legacy_history_snapshot(previous, [ExtractedAsset(name="Fund A", amount=12_000)])
        # Overstates: 10000 (before) + 12000 (raw), not the post-merge 12000
        assert snapshot.total_net_worth == 22_000
        assert snapshot.total_return_rate == pytest.approx(5)

    def test_absent_amounts_count_as_zero(self):
        snapshot = legacy_history_snapshot([], [ExtractedAsset(name="X"), ExtractedAsset(name="Y", amount=10)])
        assert snapshot.total_net_worth == 10
        assert snapshot.total_return_rate == 0
