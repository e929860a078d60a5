"""CSV export of portfolio projections.

Two report shapes:

- summary: one row per product with its totals, rate and projected value
  at the chosen horizon, followed by a TOTAL row.
- detailed: one row per investment entry.

Both start with ``#`` metadata comment lines (title, generation time).

"""

from __future__ import annotations

import csv
import io
from datetime import UTC, date, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from growthfolio.projection.engine import aggregate, future_value

if TYPE_CHECKING:
    from growthfolio.portfolio.store import PortfolioStore

SUMMARY_TOTAL_LABEL = "TOTAL"
DETAILED_HEADER = [
    "Product",
    "Provider Name",
    "Initial Investment",
    "Annual Investment",
]


def summary_header(years: int) -> list[str]:
    """Return the summary report header for a horizon."""
    return [
        "Product",
        "Total Initial",
        "Total Annual",
        "Return Rate (%)",
        f"Projected Value ({years} Years)",
    ]


def format_amount(value: float) -> str:
    """Format a number without a trailing ``.0`` on whole values."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def export_summary_csv(
    store: PortfolioStore,
    years: int,
    output_path: str | None = None,
) -> str:
    """Export per-product totals and projections to CSV.

    Args:
        store: Portfolio to report on.
        years: Projection horizon in years.
        output_path: File path to write. If None, returns CSV string.

    Returns:
        The CSV content as a string, or file path if output_path given.

    """
    output = io.StringIO()
    _write_metadata_header(output, "Portfolio Summary Export", extra=f"Horizon: {years} years")

    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(summary_header(years))

    totals_by_product = store.all_product_totals()
    rates = store.effective_rates()
    for product, totals in totals_by_product.items():
        rate = rates[product]
        projected = future_value(totals.total_initial, totals.total_annual, rate, years)
        writer.writerow(
            [
                product,
                format_amount(totals.total_initial),
                format_amount(totals.total_annual),
                format_amount(rate),
                f"{projected:.2f}",
            ]
        )

    portfolio = aggregate(totals_by_product, rates, years)
    writer.writerow(
        [
            SUMMARY_TOTAL_LABEL,
            format_amount(portfolio.total_initial),
            format_amount(portfolio.total_annual),
            "",
            f"{portfolio.total_projected:.2f}",
        ]
    )

    return _finish(output, output_path)


def export_detailed_csv(
    store: PortfolioStore,
    output_path: str | None = None,
) -> str:
    """Export every investment entry to CSV.

    Args:
        store: Portfolio to report on.
        output_path: File path to write. If None, returns CSV string.

    Returns:
        The CSV content as a string, or file path if output_path given.

    """
    output = io.StringIO()
    _write_metadata_header(output, "Portfolio Detailed Export")

    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(DETAILED_HEADER)
    for product in store.products():
        for entry in store.entries(product):
            writer.writerow(
                [
                    product,
                    entry.name,
                    format_amount(entry.initial),
                    format_amount(entry.annual),
                ]
            )

    return _finish(output, output_path)


def default_filename(kind: str, today: date | None = None) -> str:
    """Return the download file name for a report kind.

    Args:
        kind: "summary" or "detailed".
        today: Date stamped into the name. Defaults to today (UTC).

    Raises:
        ValueError: If kind is not recognized.

    """
    if kind not in {"summary", "detailed"}:
        msg = f"kind must be 'summary' or 'detailed', got '{kind}'"
        raise ValueError(msg)
    if today is None:
        today = datetime.now(tz=UTC).date()
    return f"portfolio_{kind}_{today.isoformat()}.csv"


def _finish(output: io.StringIO, output_path: str | None) -> str:
    content = output.getvalue()
    if output_path:
        Path(output_path).write_text(content, encoding="utf-8")
        return output_path
    return content


def _write_metadata_header(
    output: io.StringIO,
    title: str,
    extra: str = "",
) -> None:
    """Write metadata comment lines at the top of a CSV export.

    Args:
        output: StringIO buffer to write to.
        title: Export title.
        extra: Optional additional metadata line.

    """
    now = datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    output.write(f"# {title}\n")
    output.write(f"# Generated: {now}\n")
    if extra:
        output.write(f"# {extra}\n")
