"""Tests for entry records and input coercion."""

from __future__ import annotations

import pytest
from growthfolio.portfolio.models import (
    InvestmentEntry,
    ProductTotals,
    coerce_amount,
    require_number,
)


class TestInvestmentEntry:
    """Tests for entry serialization."""

    def test_from_dict_defaults_amounts(self) -> None:
        entry = InvestmentEntry.from_dict({"id": 7, "name": "Fund"})
        assert entry == InvestmentEntry(id="7", name="Fund", initial=0.0, annual=0.0)

    def test_to_dict(self) -> None:
        entry = InvestmentEntry(id="x", name="ETF", initial=1.5, annual=2.0)
        assert entry.to_dict() == {"id": "x", "name": "ETF", "initial": 1.5, "annual": 2.0}

    def test_from_dict_requires_id(self) -> None:
        with pytest.raises(ValueError, match="missing 'id'"):
            InvestmentEntry.from_dict({"name": "Fund"})

    def test_from_dict_null_name_is_empty(self) -> None:
        assert InvestmentEntry.from_dict({"id": "1", "name": None}).name == ""

    def test_from_dict_rejects_string_amount(self) -> None:
        with pytest.raises(ValueError, match="'initial' must be a number"):
            InvestmentEntry.from_dict({"id": "1", "initial": "500"})

    def test_product_totals_to_dict(self) -> None:
        assert ProductTotals(1.0, 2.0).to_dict() == {"totalInitial": 1.0, "totalAnnual": 2.0}


class TestCoerceAmount:
    """Tests for caller-side numeric coercion."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (1500, 1500.0),
            (2.5, 2.5),
            ("1000", 1000.0),
            (" 12.75 ", 12.75),
            ("$1,250.50", 1250.5),
            ("-3", -3.0),
        ],
    )
    def test_parses_numbers(self, raw, expected) -> None:
        assert coerce_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", None, float("nan"), float("inf"), True])
    def test_unparsable_collapses_to_zero(self, raw) -> None:
        assert coerce_amount(raw) == 0.0

    def test_custom_default(self) -> None:
        assert coerce_amount("n/a", default=5.0) == 5.0


class TestRequireNumber:
    """Tests for strict validation of stored amounts."""

    def test_none_is_zero(self) -> None:
        assert require_number(None, "annual") == 0.0

    def test_int_becomes_float(self) -> None:
        value = require_number(3, "initial")
        assert value == 3.0
        assert isinstance(value, float)

    @pytest.mark.parametrize("raw", ["4", True, [1], float("inf"), float("nan")])
    def test_rejects_non_numbers(self, raw) -> None:
        with pytest.raises(ValueError, match="rate"):
            require_number(raw, "rate")
