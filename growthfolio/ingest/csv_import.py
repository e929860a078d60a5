"""CSV import of investment entries.

Parses a detailed portfolio report (as written by
``export.csv_export.export_detailed_csv``, or a hand-made sheet with
similar columns) into the ``investments`` half of a snapshot, ready for
``PortfolioStore.restore``.

Accepted column names (case-insensitive):
- product: Product, Category
- name: Provider Name, Name, Investment
- initial: Initial Investment, Initial, Lump Sum
- annual: Annual Investment, Annual, Annual Contribution

"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any

from growthfolio.config import MAX_ENTRIES_PER_PRODUCT
from growthfolio.portfolio.models import coerce_amount

logger = logging.getLogger(__name__)

# Known column name mappings to our canonical field names
_COLUMN_ALIASES: dict[str, list[str]] = {
    "product": ["product", "category"],
    "name": ["provider name", "name", "investment"],
    "initial": ["initial investment", "initial", "lump sum"],
    "annual": ["annual investment", "annual", "annual contribution"],
}


def _normalize_header(header: str) -> str:
    return header.strip().lower()


def _map_columns(raw_headers: list[str]) -> dict[str, int]:
    """Map raw CSV headers to canonical field names.

    Args:
        raw_headers: List of raw header strings from the CSV.

    Returns:
        Dict mapping canonical field name to column index.

    Raises:
        ValueError: If the product column cannot be found.

    """
    normalized = [_normalize_header(h) for h in raw_headers]
    mapping: dict[str, int] = {}

    for canonical, aliases in _COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                mapping[canonical] = normalized.index(alias)
                break

    if "product" not in mapping:
        msg = f"Required column not found: 'product'. Available: {raw_headers}"
        raise ValueError(msg)

    return mapping


def _cell(row: list[str], col_map: dict[str, int], field: str) -> str:
    idx = col_map.get(field)
    if idx is None or idx >= len(row):
        return ""
    return row[idx].strip()


def parse_detailed_csv(
    file_path: str | Path | None = None,
    csv_content: str | None = None,
) -> dict[str, list[dict[str, Any]]]:
    """Parse a detailed report into per-product entry records.

    Provide either file_path or csv_content, not both. Lines starting
    with ``#`` are treated as comments. Entries get ids "1", "2", ...
    per product in file order; rows beyond the per-product cap are
    dropped.

    Args:
        file_path: Path to the CSV file.
        csv_content: Raw CSV content as a string.

    Returns:
        Dict mapping product name to a list of entry dicts with keys
        id, name, initial, annual.

    Raises:
        ValueError: If neither file_path nor csv_content is provided,
            or if the product column is missing.

    """
    if file_path is None and csv_content is None:
        msg = "Provide either file_path or csv_content"
        raise ValueError(msg)

    if file_path is not None:
        text = Path(file_path).read_text(encoding="utf-8")
    else:
        text = csv_content  # type: ignore[assignment]

    lines = [line for line in text.splitlines() if not line.lstrip().startswith("#")]
    reader = csv.reader(io.StringIO("\n".join(lines)))
    try:
        raw_headers = next(reader)
    except StopIteration:
        msg = "CSV content has no header row"
        raise ValueError(msg) from None
    col_map = _map_columns(raw_headers)

    investments: dict[str, list[dict[str, Any]]] = {}
    skipped = 0

    for row in reader:
        if not any(cell.strip() for cell in row):
            continue

        product = _cell(row, col_map, "product")
        if not product:
            skipped += 1
            continue

        entries = investments.setdefault(product, [])
        if len(entries) >= MAX_ENTRIES_PER_PRODUCT:
            skipped += 1
            continue

        name = _cell(row, col_map, "name") or f"Investment {len(entries) + 1}"
        entries.append(
            {
                "id": str(len(entries) + 1),
                "name": name,
                "initial": coerce_amount(_cell(row, col_map, "initial")),
                "annual": coerce_amount(_cell(row, col_map, "annual")),
            }
        )

    if skipped:
        logger.warning("Skipped %d rows (missing product or over capacity)", skipped)

    logger.info(
        "Parsed %d entries across %d products from CSV",
        sum(len(v) for v in investments.values()),
        len(investments),
    )
    return investments
