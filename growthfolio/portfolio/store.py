"""In-memory portfolio state: entries and return rates per product.

A ``PortfolioStore`` is the single source of truth for one user's
portfolio. It is owned by whoever needs it (a sidecar session, a test)
and passed around explicitly; there is no module-level instance.

Rejected mutations (adding past the per-product cap, removing the last
entry, touching an unknown id) are silent no-ops, reported only through
the return value.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from growthfolio.config import (
    MAX_ENTRIES_PER_PRODUCT,
    PRODUCT_CATALOG,
    PRODUCT_NAMES,
    baseline_rate,
)
from growthfolio.portfolio.models import (
    EDITABLE_FIELDS,
    InvestmentEntry,
    ProductTotals,
    require_number,
)

logger = logging.getLogger(__name__)

_SEED_ENTRY_ID = "1"


def _generate_entry_id(existing: set[str]) -> str:
    """Generate a short random id not already used in ``existing``."""
    while True:
        entry_id = uuid.uuid4().hex[:9]
        if entry_id not in existing:
            return entry_id


def default_state() -> tuple[dict[str, list[InvestmentEntry]], dict[str, float]]:
    """Build the deterministic seed state from the product catalog.

    Returns:
        Tuple of (investments, return_rates): one seed entry per product
        and each product's baseline rate.

    """
    investments = {
        p.name: [
            InvestmentEntry(
                id=_SEED_ENTRY_ID,
                name=p.seed_entry_name,
                initial=p.seed_initial,
                annual=0.0,
            )
        ]
        for p in PRODUCT_CATALOG
    }
    return_rates = {p.name: p.baseline_rate for p in PRODUCT_CATALOG}
    return investments, return_rates


class PortfolioStore:
    """Canonical portfolio state for one user.

    Attributes:
        investments: Product name to ordered list of entries.
        return_rates: Product name to annual return rate in percent.

    """

    def __init__(
        self,
        investments: dict[str, list[InvestmentEntry]] | None = None,
        return_rates: dict[str, float] | None = None,
    ) -> None:
        if investments is None and return_rates is None:
            investments, return_rates = default_state()
        self.investments: dict[str, list[InvestmentEntry]] = investments or {}
        self.return_rates: dict[str, float] = return_rates or {}

    # ── reads ─────────────────────────────────────────────────────

    def products(self) -> list[str]:
        """Return catalog products first, then any extra products in state."""
        names = list(PRODUCT_NAMES)
        for name in [*self.investments, *self.return_rates]:
            if name not in names:
                names.append(name)
        return names

    def entries(self, product: str) -> list[InvestmentEntry]:
        """Return a copy of a product's entries (empty if none)."""
        return list(self.investments.get(product, []))

    def return_rate(self, product: str, default: float | None = None) -> float:
        """Return the effective annual rate for a product.

        Falls back to ``default``, then to the catalog baseline, then 0.
        """
        if product in self.return_rates:
            return self.return_rates[product]
        if default is not None:
            return default
        baseline = baseline_rate(product)
        return baseline if baseline is not None else 0.0

    def get_product_totals(self, product: str) -> ProductTotals:
        """Sum initial and annual amounts across a product's entries."""
        entries = self.investments.get(product, [])
        return ProductTotals(
            total_initial=sum(e.initial for e in entries),
            total_annual=sum(e.annual for e in entries),
        )

    def all_product_totals(self) -> dict[str, ProductTotals]:
        """Return totals for every product, in ``products()`` order."""
        return {name: self.get_product_totals(name) for name in self.products()}

    def effective_rates(self) -> dict[str, float]:
        """Return the effective rate for every product."""
        return {name: self.return_rate(name) for name in self.products()}

    # ── mutations ─────────────────────────────────────────────────

    def add_entry(self, product: str) -> InvestmentEntry | None:
        """Append a blank entry to a product.

        Args:
            product: Product name. A product without a list gets one.

        Returns:
            The new entry, or None if the product is already at capacity.

        """
        entries = self.investments.setdefault(product, [])
        if len(entries) >= MAX_ENTRIES_PER_PRODUCT:
            logger.debug("Add rejected: %s already has %d entries", product, len(entries))
            return None

        entry = InvestmentEntry(
            id=_generate_entry_id({e.id for e in entries}),
            name=f"Investment {len(entries) + 1}",
        )
        entries.append(entry)
        logger.debug("Added entry %s to %s", entry.id, product)
        return entry

    def remove_entry(self, product: str, entry_id: str) -> bool:
        """Remove an entry by id.

        Returns:
            True if removed; False if the id is unknown or the entry is
            the product's last one.

        """
        entries = self.investments.get(product, [])
        if len(entries) <= 1:
            logger.debug("Remove rejected: %s would be left empty", product)
            return False

        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            logger.debug("Remove ignored: no entry %s in %s", entry_id, product)
            return False

        self.investments[product] = remaining
        logger.debug("Removed entry %s from %s", entry_id, product)
        return True

    def update_entry(self, product: str, entry_id: str, field: str, value: Any) -> bool:
        """Set ``name``, ``initial`` or ``annual`` on an entry.

        The value is stored as given; callers coerce numeric input first
        (see ``coerce_amount``).

        Args:
            product: Product name.
            entry_id: Id of the entry to change.
            field: One of "name", "initial", "annual".
            value: New value.

        Returns:
            True if an entry was updated, False if the id is unknown.

        Raises:
            ValueError: If field is not editable.

        """
        if field not in EDITABLE_FIELDS:
            msg = f"field must be one of {sorted(EDITABLE_FIELDS)}, got '{field}'"
            raise ValueError(msg)

        for entry in self.investments.get(product, []):
            if entry.id == entry_id:
                setattr(entry, field, value)
                logger.debug("Updated %s.%s on %s", entry_id, field, product)
                return True

        logger.debug("Update ignored: no entry %s in %s", entry_id, product)
        return False

    def update_return_rate(self, product: str, rate: float) -> None:
        """Overwrite the annual return rate (percent) for a product."""
        self.return_rates[product] = rate
        logger.debug("Return rate for %s set to %s%%", product, rate)

    # ── snapshot / restore ────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Export the full state as a JSON-ready dict.

        Returns:
            Dict with "investments" (product -> list of entry dicts) and
            "returnRates" (product -> rate).

        """
        return {
            "investments": {
                product: [e.to_dict() for e in entries]
                for product, entries in self.investments.items()
            },
            "returnRates": dict(self.return_rates),
        }

    def restore(self, snapshot: dict[str, Any]) -> None:
        """Replace the current state with a snapshot.

        Either half of the snapshot may be absent, in which case the
        current value for that half is kept.

        Args:
            snapshot: Dict in the shape produced by ``snapshot()``.

        Raises:
            ValueError: If the snapshot is malformed or holds a non-numeric
                amount or rate. State is unchanged.

        """
        if not isinstance(snapshot, dict):
            msg = f"Snapshot must be a dict, got {type(snapshot).__name__}"
            raise ValueError(msg)

        investments = self.investments
        raw_investments = snapshot.get("investments")
        if raw_investments is not None:
            if not isinstance(raw_investments, dict):
                msg = "Snapshot 'investments' must map product names to entry lists"
                raise ValueError(msg)
            for product, records in raw_investments.items():
                if not isinstance(records, list):
                    msg = f"Entries for '{product}' must be a list"
                    raise ValueError(msg)
            investments = {
                str(product): [InvestmentEntry.from_dict(r) for r in records]
                for product, records in raw_investments.items()
            }

        return_rates = self.return_rates
        raw_rates = snapshot.get("returnRates")
        if raw_rates is not None:
            if not isinstance(raw_rates, dict):
                msg = "Snapshot 'returnRates' must map product names to rates"
                raise ValueError(msg)
            return_rates = {
                str(product): require_number(rate, f"returnRates.{product}")
                for product, rate in raw_rates.items()
            }

        self.investments = investments
        self.return_rates = return_rates
        logger.info(
            "Restored portfolio: %d products, %d entries",
            len(investments),
            sum(len(v) for v in investments.values()),
        )

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> PortfolioStore:
        """Create a store seeded with defaults, then restored from a snapshot."""
        store = cls()
        store.restore(snapshot)
        return store
