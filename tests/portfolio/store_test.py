"""Tests for the in-memory portfolio store."""

from __future__ import annotations

import json

import pytest
from growthfolio.config import MAX_ENTRIES_PER_PRODUCT, PRODUCT_NAMES
from growthfolio.portfolio.models import InvestmentEntry, ProductTotals
from growthfolio.portfolio.store import PortfolioStore, default_state


class TestDefaultState:
    """Tests for the deterministic seed."""

    def test_one_entry_per_product(self, seeded_store) -> None:
        for product in PRODUCT_NAMES:
            entries = seeded_store.entries(product)
            assert len(entries) == 1
            assert entries[0].id == "1"

    def test_seed_values(self, seeded_store) -> None:
        savings = seeded_store.entries("Savings")[0]
        assert savings.name == "Primary Savings"
        assert savings.initial == 10_000.0
        assert seeded_store.entries("Crypto")[0].name == "Bitcoin"
        assert seeded_store.return_rates == {
            "Savings": 2.5,
            "Bonds": 5.0,
            "Index Funds": 9.0,
            "Growth Stocks": 15.0,
            "Dividend Stocks": 12.0,
            "Crypto": 15.0,
        }

    def test_seed_is_reproducible(self) -> None:
        assert PortfolioStore().snapshot() == PortfolioStore().snapshot()

    def test_default_state_returns_fresh_objects(self) -> None:
        first, _ = default_state()
        first["Savings"][0].initial = 1.0
        second, _ = default_state()
        assert second["Savings"][0].initial == 10_000.0


class TestAddEntry:
    """Tests for appending entries."""

    def test_appends_blank_entry(self, seeded_store) -> None:
        entry = seeded_store.add_entry("Bonds")
        assert entry is not None
        assert entry.name == "Investment 2"
        assert entry.initial == 0.0
        assert entry.annual == 0.0
        assert seeded_store.entries("Bonds")[-1] == entry

    def test_ids_are_unique(self, seeded_store) -> None:
        for _ in range(MAX_ENTRIES_PER_PRODUCT - 1):
            seeded_store.add_entry("Crypto")
        ids = [e.id for e in seeded_store.entries("Crypto")]
        assert len(set(ids)) == len(ids)

    def test_eleventh_entry_is_rejected(self, seeded_store) -> None:
        for _ in range(MAX_ENTRIES_PER_PRODUCT - 1):
            assert seeded_store.add_entry("Savings") is not None
        assert len(seeded_store.entries("Savings")) == 10

        assert seeded_store.add_entry("Savings") is None
        assert len(seeded_store.entries("Savings")) == 10

    def test_creates_list_for_new_product(self) -> None:
        store = PortfolioStore(investments={}, return_rates={})
        entry = store.add_entry("Gold")
        assert entry is not None
        assert entry.name == "Investment 1"
        assert store.entries("Gold") == [entry]


class TestRemoveEntry:
    """Tests for removing entries."""

    def test_removes_matching_entry(self, seeded_store) -> None:
        added = seeded_store.add_entry("Bonds")
        assert seeded_store.remove_entry("Bonds", added.id) is True
        assert [e.id for e in seeded_store.entries("Bonds")] == ["1"]

    def test_last_entry_is_kept(self, seeded_store) -> None:
        assert seeded_store.remove_entry("Bonds", "1") is False
        assert len(seeded_store.entries("Bonds")) == 1

    def test_unknown_id_is_noop(self, two_entry_store) -> None:
        assert two_entry_store.remove_entry("Savings", "zzz") is False
        assert len(two_entry_store.entries("Savings")) == 2

    def test_unknown_product_is_noop(self, seeded_store) -> None:
        assert seeded_store.remove_entry("Gold", "1") is False

    def test_preserves_order(self, two_entry_store) -> None:
        c = two_entry_store.add_entry("Savings")
        two_entry_store.remove_entry("Savings", "b")
        assert [e.id for e in two_entry_store.entries("Savings")] == ["a", c.id]


class TestUpdateEntry:
    """Tests for editing entries."""

    def test_updates_fields(self, seeded_store) -> None:
        assert seeded_store.update_entry("Bonds", "1", "name", "Treasuries")
        assert seeded_store.update_entry("Bonds", "1", "initial", 2_500.0)
        assert seeded_store.update_entry("Bonds", "1", "annual", 100.0)
        entry = seeded_store.entries("Bonds")[0]
        assert entry == InvestmentEntry(id="1", name="Treasuries", initial=2_500.0, annual=100.0)

    def test_unknown_id_is_noop(self, seeded_store) -> None:
        before = seeded_store.snapshot()
        assert seeded_store.update_entry("Bonds", "nope", "initial", 5.0) is False
        assert seeded_store.snapshot() == before

    def test_id_is_not_editable(self, seeded_store) -> None:
        with pytest.raises(ValueError, match="field must be one of"):
            seeded_store.update_entry("Bonds", "1", "id", "2")


class TestReturnRates:
    """Tests for rate overrides and fallbacks."""

    def test_update_overwrites(self, seeded_store) -> None:
        seeded_store.update_return_rate("Crypto", 0.0)
        assert seeded_store.return_rate("Crypto") == 0.0

    def test_missing_rate_falls_back_to_default(self) -> None:
        store = PortfolioStore(investments={}, return_rates={})
        assert store.return_rate("Bonds", default=1.5) == 1.5

    def test_missing_rate_falls_back_to_baseline(self) -> None:
        store = PortfolioStore(investments={}, return_rates={})
        assert store.return_rate("Index Funds") == 9.0
        assert store.return_rate("Gold") == 0.0


class TestProductTotals:
    """Tests for per-product totals."""

    def test_sums_entries(self, two_entry_store) -> None:
        totals = two_entry_store.get_product_totals("Savings")
        assert totals == ProductTotals(total_initial=5_000.0, total_annual=200.0)

    def test_missing_product_is_zero(self, two_entry_store) -> None:
        assert two_entry_store.get_product_totals("Crypto") == ProductTotals(0.0, 0.0)

    def test_all_product_totals_covers_catalog(self, seeded_store) -> None:
        seeded_store.add_entry("Gold")
        totals = seeded_store.all_product_totals()
        assert list(totals) == [*PRODUCT_NAMES, "Gold"]
        assert totals["Savings"].total_initial == 10_000.0


class TestSnapshot:
    """Tests for snapshot export and restore."""

    def test_snapshot_shape(self, two_entry_store) -> None:
        snapshot = two_entry_store.snapshot()
        assert snapshot == {
            "investments": {
                "Savings": [
                    {"id": "a", "name": "Lump", "initial": 5000.0, "annual": 0.0},
                    {"id": "b", "name": "Monthly", "initial": 0.0, "annual": 200.0},
                ],
            },
            "returnRates": {"Savings": 10.0},
        }
        json.dumps(snapshot)

    def test_snapshot_is_detached(self, two_entry_store) -> None:
        snapshot = two_entry_store.snapshot()
        snapshot["investments"]["Savings"][0]["initial"] = 1.0
        snapshot["returnRates"]["Savings"] = 0.0
        assert two_entry_store.get_product_totals("Savings").total_initial == 5_000.0
        assert two_entry_store.return_rate("Savings") == 10.0

    def test_restore_replaces_state(self, seeded_store, two_entry_store) -> None:
        seeded_store.restore(two_entry_store.snapshot())
        assert seeded_store.snapshot() == two_entry_store.snapshot()
        assert seeded_store.entries("Crypto") == []

    def test_restore_keeps_missing_half(self, seeded_store) -> None:
        seeded_store.restore({"returnRates": {"Savings": 4.0}})
        assert seeded_store.entries("Savings")[0].name == "Primary Savings"
        assert seeded_store.return_rates == {"Savings": 4.0}

    def test_from_snapshot(self, two_entry_store) -> None:
        store = PortfolioStore.from_snapshot(two_entry_store.snapshot())
        assert store.get_product_totals("Savings").total_annual == 200.0

    @pytest.mark.parametrize(
        "snapshot",
        [
            [],
            {"investments": []},
            {"investments": {"Savings": {"id": "1"}}},
            {"investments": {"Savings": [{"name": "no id"}]}},
            {"returnRates": [1, 2]},
            {"investments": {"Savings": [{"id": "1", "name": "x", "initial": "500"}]}},
            {"investments": {"Savings": [{"id": "1", "annual": True}]}},
            {"investments": {"Savings": [{"id": "1", "initial": float("nan")}]}},
            {"returnRates": {"Savings": "4"}},
            {"investments": {}, "returnRates": {"Bonds": [5]}},
        ],
    )
    def test_malformed_snapshot_raises(self, seeded_store, snapshot) -> None:
        before = seeded_store.snapshot()
        with pytest.raises(ValueError):
            seeded_store.restore(snapshot)
        assert seeded_store.snapshot() == before

    def test_restore_accepts_integer_amounts(self, seeded_store) -> None:
        seeded_store.restore(
            {
                "investments": {"Bonds": [{"id": "1", "name": None, "initial": 500, "annual": None}]},
                "returnRates": {"Bonds": 4},
            }
        )
        assert seeded_store.entries("Bonds")[0] == InvestmentEntry(
            id="1", name="", initial=500.0, annual=0.0
        )
        assert seeded_store.return_rate("Bonds") == 4.0
