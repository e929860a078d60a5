"""Static configuration for growthfolio.

Holds the product catalog (baseline return rates and descriptive risk
metadata), portfolio limits, the projection horizon bounds, and the
environment-driven settings for the persistence layer.

The risk level and volatility figures are descriptive only; nothing in
the projection engine reads them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# ── Portfolio limits ──

MAX_ENTRIES_PER_PRODUCT = 10

MIN_HORIZON_YEARS = 1
MAX_HORIZON_YEARS = 30
DEFAULT_HORIZON_YEARS = 10

# Risk levels in ascending order, with the label shown next to each
RISK_LEVELS: dict[str, str] = {
    "Low": "Conservative",
    "Medium": "Moderate",
    "High": "Aggressive",
    "Very High": "Speculative",
}


@dataclass(frozen=True)
class ProductProfile:
    """Catalog record for one investment product.

    Attributes:
        name: Display name, also the key used in portfolio state.
        slug: URL-safe identifier.
        baseline_rate: Default annual return rate, in percent.
        risk_level: One of the keys of ``RISK_LEVELS``.
        volatility: Typical annual price fluctuation, in percent.
        description: One-line description of the product.
        seed_entry_name: Name of the entry a fresh portfolio starts with.
        seed_initial: Initial amount of the seed entry.

    """

    name: str
    slug: str
    baseline_rate: float
    risk_level: str
    volatility: float
    description: str
    seed_entry_name: str
    seed_initial: float = 0.0

    @property
    def risk_label(self) -> str:
        """Return the investor-profile label for the risk level."""
        return RISK_LEVELS[self.risk_level]


PRODUCT_CATALOG: tuple[ProductProfile, ...] = (
    ProductProfile(
        name="Savings",
        slug="savings",
        baseline_rate=2.5,
        risk_level="Low",
        volatility=1.0,
        description=(
            "Traditional savings accounts offer FDIC insurance and "
            "guaranteed returns with minimal risk"
        ),
        seed_entry_name="Primary Savings",
        seed_initial=10_000.0,
    ),
    ProductProfile(
        name="Bonds",
        slug="bonds",
        baseline_rate=5.0,
        risk_level="Medium",
        volatility=8.0,
        description=(
            "Fixed-income securities that provide regular interest "
            "payments with moderate risk"
        ),
        seed_entry_name="Government Bonds",
    ),
    ProductProfile(
        name="Index Funds",
        slug="index-funds",
        baseline_rate=9.0,
        risk_level="High",
        volatility=18.0,
        description=(
            "Diversified market index funds tracking major stock indices "
            "with long-term growth potential"
        ),
        seed_entry_name="S&P 500",
    ),
    ProductProfile(
        name="Growth Stocks",
        slug="growth-stocks",
        baseline_rate=15.0,
        risk_level="High",
        volatility=25.0,
        description=(
            "High-growth companies with significant appreciation "
            "potential but higher volatility"
        ),
        seed_entry_name="Tech ETF",
    ),
    ProductProfile(
        name="Dividend Stocks",
        slug="dividend-stocks",
        baseline_rate=12.0,
        risk_level="High",
        volatility=20.0,
        description=(
            "Established companies providing regular dividend income "
            "with moderate growth potential"
        ),
        seed_entry_name="Dividend Aristocrats",
    ),
    ProductProfile(
        name="Crypto",
        slug="crypto",
        baseline_rate=15.0,
        risk_level="Very High",
        volatility=65.0,
        description=(
            "Digital assets with extreme volatility and potential for "
            "significant gains or losses"
        ),
        seed_entry_name="Bitcoin",
    ),
)

PRODUCT_NAMES: tuple[str, ...] = tuple(p.name for p in PRODUCT_CATALOG)

_PRODUCTS_BY_NAME: dict[str, ProductProfile] = {p.name: p for p in PRODUCT_CATALOG}


def get_product(name: str) -> ProductProfile:
    """Look up a catalog product by name.

    Args:
        name: Product display name (e.g., "Index Funds").

    Returns:
        The matching ProductProfile.

    Raises:
        ValueError: If the product is not in the catalog.

    """
    if name not in _PRODUCTS_BY_NAME:
        msg = f"Unknown product: '{name}'. Known products: {list(PRODUCT_NAMES)}"
        raise ValueError(msg)
    return _PRODUCTS_BY_NAME[name]


def baseline_rate(name: str) -> float | None:
    """Return the catalog baseline rate for a product, or None if unknown."""
    profile = _PRODUCTS_BY_NAME.get(name)
    return profile.baseline_rate if profile else None


# ── Environment-driven settings ──

_DATA_DIR_ENV = "GROWTHFOLIO_DATA_DIR"
_AUTOSAVE_DELAY_ENV = "GROWTHFOLIO_AUTOSAVE_DELAY"

_DEFAULT_DATA_DIR = Path.home() / ".growthfolio" / "data"
_DEFAULT_AUTOSAVE_DELAY = 1.0


def data_dir() -> Path:
    """Return the directory holding the portfolio database.

    Uses the GROWTHFOLIO_DATA_DIR env var when set, otherwise
    ``~/.growthfolio/data``.
    """
    override = os.environ.get(_DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


def autosave_delay() -> float:
    """Return the autosave debounce delay in seconds.

    Reads GROWTHFOLIO_AUTOSAVE_DELAY; falls back to one second when the
    variable is unset, unparsable, or negative.
    """
    raw = os.environ.get(_AUTOSAVE_DELAY_ENV, "")
    try:
        delay = float(raw)
    except ValueError:
        return _DEFAULT_AUTOSAVE_DELAY
    return delay if delay >= 0 else _DEFAULT_AUTOSAVE_DELAY
