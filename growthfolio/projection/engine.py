"""Compound-growth projection engine.

Pure functions over explicit numbers; nothing here reads or mutates a
``PortfolioStore``. Rates are annual percentages (``9`` means 9%).

The recurring contribution is valued as an ordinary annuity: each
year's contribution is made at the end of the year, so the first one
earns ``years - 1`` years of growth.

Inputs are not validated. Negative amounts, rates or horizons give
well-defined but financially meaningless numbers.

References:
    Future value of an ordinary annuity:
    FV = PMT * ((1 + r)^n - 1) / r

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from growthfolio.config import MAX_HORIZON_YEARS, MIN_HORIZON_YEARS

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from growthfolio.portfolio.models import ProductTotals


@dataclass(frozen=True)
class ProductProjection:
    """Projected figures for a single product at one horizon.

    Attributes:
        total_invested: Straight-line sum of contributions.
        projected_value: Future value after compounding.
        gain: projected_value - total_invested.
        total_return_percent: Gain as a percentage of total_invested.

    """

    total_invested: float
    projected_value: float
    gain: float
    total_return_percent: float

    def to_dict(self) -> dict[str, float]:
        return {
            "totalInvested": self.total_invested,
            "projectedValue": self.projected_value,
            "gain": self.gain,
            "totalReturnPercent": self.total_return_percent,
        }


@dataclass(frozen=True)
class PortfolioProjection:
    """Portfolio-wide totals at one horizon.

    Attributes:
        total_initial: Sum of every product's initial amounts.
        total_annual: Sum of every product's annual contributions.
        total_projected: Sum of every product's future value, each
            compounded at that product's own rate.
        total_invested: total_initial + total_annual * years.
        total_return_percent: Return derived from total_projected and
            total_invested (not an average of per-product returns).

    """

    total_initial: float
    total_annual: float
    total_projected: float
    total_invested: float
    total_return_percent: float

    def to_dict(self) -> dict[str, float]:
        return {
            "totalInitial": self.total_initial,
            "totalAnnual": self.total_annual,
            "totalProjected": self.total_projected,
            "totalInvested": self.total_invested,
            "totalReturnPercent": self.total_return_percent,
        }


def future_value(
    initial: float,
    annual: float,
    rate_percent: float,
    years: float,
) -> float:
    """Project the value of a lump sum plus yearly contributions.

    Args:
        initial: Lump sum invested at the start.
        annual: Contribution made at the end of each year.
        rate_percent: Annual return rate in percent.
        years: Horizon in years. ``0`` returns ``initial`` unchanged.

    Returns:
        Future value of the lump sum plus the annuity.

    """
    r = rate_percent / 100.0
    growth = (1.0 + r) ** years
    fv_initial = initial * growth

    fv_annual = 0.0
    if annual > 0 and r > 0:
        fv_annual = annual * ((growth - 1.0) / r)
    elif annual > 0 and r == 0:
        fv_annual = annual * years

    return fv_initial + fv_annual


def total_invested(initial: float, annual: float, years: float) -> float:
    """Return the straight-line sum of contributions, independent of rate."""
    return initial + annual * years


def total_return_percent(
    initial: float,
    annual: float,
    rate_percent: float,
    years: float,
) -> float:
    """Return the projected gain as a percentage of the amount invested.

    Returns exactly ``0.0`` when nothing is invested, even though the
    ratio is undefined in that case.
    """
    invested = total_invested(initial, annual, years)
    if invested == 0:
        return 0.0
    projected = future_value(initial, annual, rate_percent, years)
    return (projected - invested) / invested * 100.0


def project_product(
    initial: float,
    annual: float,
    rate_percent: float,
    years: float,
) -> ProductProjection:
    """Compute every per-product figure for one horizon."""
    invested = total_invested(initial, annual, years)
    projected = future_value(initial, annual, rate_percent, years)
    return ProductProjection(
        total_invested=invested,
        projected_value=projected,
        gain=projected - invested,
        total_return_percent=total_return_percent(initial, annual, rate_percent, years),
    )


def aggregate(
    product_totals: Mapping[str, ProductTotals],
    rates_by_product: Mapping[str, float],
    years: float,
    default_rate: float = 0.0,
) -> PortfolioProjection:
    """Aggregate per-product totals into portfolio-wide figures.

    Args:
        product_totals: Product name to its summed entry amounts
            (as returned by ``PortfolioStore.all_product_totals``).
        rates_by_product: Product name to annual rate in percent.
        years: Horizon in years.
        default_rate: Rate used for products missing from
            rates_by_product.

    Returns:
        PortfolioProjection for the horizon.

    """
    total_initial = 0.0
    total_annual = 0.0
    total_projected = 0.0

    for product, totals in product_totals.items():
        rate = rates_by_product.get(product, default_rate)
        total_initial += totals.total_initial
        total_annual += totals.total_annual
        total_projected += future_value(
            totals.total_initial, totals.total_annual, rate, years
        )

    invested = total_invested(total_initial, total_annual, years)
    return_pct = 0.0
    if invested != 0:
        return_pct = (total_projected - invested) / invested * 100.0

    return PortfolioProjection(
        total_initial=total_initial,
        total_annual=total_annual,
        total_projected=total_projected,
        total_invested=invested,
        total_return_percent=return_pct,
    )


def projection_schedule(
    initial: float,
    annual: float,
    rate_percent: float,
    years: int,
) -> NDArray[np.float64]:
    """Compute the projected value at the end of every year.

    Args:
        initial: Lump sum invested at the start.
        annual: Contribution made at the end of each year.
        rate_percent: Annual return rate in percent.
        years: Horizon in whole years.

    Returns:
        Array of length ``years + 1``; element ``t`` is
        ``future_value(initial, annual, rate_percent, t)``.

    """
    r = rate_percent / 100.0
    t = np.arange(years + 1, dtype=np.float64)
    growth = np.power(1.0 + r, t)

    values = initial * growth
    if annual > 0 and r > 0:
        values = values + annual * (growth - 1.0) / r
    elif annual > 0 and r == 0:
        values = values + annual * t
    return values


def validate_horizon(years: int) -> int:
    """Check a caller-supplied horizon against the supported range.

    Args:
        years: Horizon in whole years.

    Returns:
        The horizon as an int.

    Raises:
        ValueError: If years is not a whole number in
            [MIN_HORIZON_YEARS, MAX_HORIZON_YEARS].

    """
    whole = (
        isinstance(years, int | float)
        and not isinstance(years, bool)
        and float(years).is_integer()
    )
    if not whole:
        msg = f"years must be a whole number, got {years!r}"
        raise ValueError(msg)
    years = int(years)
    if not MIN_HORIZON_YEARS <= years <= MAX_HORIZON_YEARS:
        msg = (
            f"years must be between {MIN_HORIZON_YEARS} and "
            f"{MAX_HORIZON_YEARS}, got {years}"
        )
        raise ValueError(msg)
    return years
