"""Data model for portfolio entries and per-product totals."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

# Fields a caller may change on an existing entry (``id`` is immutable)
EDITABLE_FIELDS: frozenset[str] = frozenset({"name", "initial", "annual"})
NUMERIC_FIELDS: frozenset[str] = frozenset({"initial", "annual"})


@dataclass
class InvestmentEntry:
    """One named contribution line within a product.

    Attributes:
        id: Identifier, unique within the product's entry list.
        name: Free-form label (e.g., provider or fund name).
        initial: Lump sum invested at the start of the horizon.
        annual: Amount contributed at the end of every year.

    """

    id: str
    name: str
    initial: float = 0.0
    annual: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot record shape."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InvestmentEntry:
        """Build an entry from a snapshot record.

        Args:
            data: Dict with keys id, name, initial, annual. Missing
                amounts default to 0.

        Returns:
            The reconstructed entry.

        Raises:
            ValueError: If the record is not a dict, has no id, or
                carries a non-numeric amount.

        """
        if not isinstance(data, dict):
            msg = f"Entry record must be a dict, got {type(data).__name__}"
            raise ValueError(msg)
        if "id" not in data:
            msg = f"Entry record is missing 'id': {data}"
            raise ValueError(msg)
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            initial=require_number(data.get("initial"), "initial"),
            annual=require_number(data.get("annual"), "annual"),
        )


@dataclass(frozen=True)
class ProductTotals:
    """Summed amounts across all entries of one product."""

    total_initial: float = 0.0
    total_annual: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"totalInitial": self.total_initial, "totalAnnual": self.total_annual}


def coerce_amount(value: Any, default: float = 0.0) -> float:
    """Coerce raw user input to a monetary amount.

    Numeric coercion happens before a value reaches the store. Strings
    may carry currency symbols and thousands separators; anything that
    still fails to parse (or is NaN) collapses to ``default``.

    Args:
        value: Raw input (number, string, or None).
        default: Value used when parsing fails.

    Returns:
        Parsed float amount.

    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        number = float(value)
    else:
        cleaned = str(value).strip().replace("$", "").replace(",", "")
        if not cleaned:
            return default
        try:
            number = float(cleaned)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def require_number(value: Any, label: str) -> float:
    """Validate a stored amount or rate; a missing value (None) is 0.

    Raises:
        ValueError: If the value is not a finite real number.

    """
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"'{label}' must be a number, got {type(value).__name__}"
        raise ValueError(msg)
    if math.isnan(value) or math.isinf(value):
        msg = f"'{label}' must be finite, got {value}"
        raise ValueError(msg)
    return float(value)
