"""JSON export for portfolio snapshots.

Wraps a snapshot in an envelope with export metadata so a saved file
can be told apart from a raw snapshot and re-imported later.

"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import numpy as np

FORMAT_VERSION = "1.0"


class SnapshotEncoder(json.JSONEncoder):
    """JSON encoder that handles NumPy arrays (projection paths)."""

    def default(self, o: Any) -> Any:
        """Convert NumPy arrays to lists."""
        if isinstance(o, np.ndarray):
            return o.tolist()
        return super().default(o)


def export_snapshot_json(
    snapshot: dict[str, Any],
    output_path: str | None = None,
) -> str:
    """Export a portfolio snapshot to JSON format.

    Args:
        snapshot: Dict with "investments" and "returnRates" keys.
        output_path: File path to write. If None, returns JSON string.

    Returns:
        JSON string, or file path if output_path given.

    """
    investments = snapshot.get("investments", {})
    return_rates = snapshot.get("returnRates", {})

    export_data: dict[str, Any] = {
        "metadata": {
            "export_date": datetime.now(tz=UTC).isoformat(),
            "format_version": FORMAT_VERSION,
            "source": "growthfolio",
            "products_count": len(investments),
            "entries_count": sum(len(entries) for entries in investments.values()),
        },
        "investments": investments,
        "returnRates": return_rates,
    }

    content = json.dumps(export_data, cls=SnapshotEncoder, indent=2)

    if output_path:
        Path(output_path).write_text(content, encoding="utf-8")
        return output_path
    return content


def load_snapshot_json(
    file_path: str | Path | None = None,
    json_content: str | None = None,
) -> dict[str, Any]:
    """Read a snapshot back from an export (or a bare snapshot).

    Args:
        file_path: Path to the JSON file.
        json_content: Raw JSON content as a string.

    Returns:
        Snapshot dict with "investments" and "returnRates" keys.

    Raises:
        ValueError: If neither source is given or the JSON is not an object.

    """
    if file_path is None and json_content is None:
        msg = "Provide either file_path or json_content"
        raise ValueError(msg)

    if file_path is not None:
        text = Path(file_path).read_text(encoding="utf-8")
    else:
        text = json_content  # type: ignore[assignment]

    data = json.loads(text)
    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    return {
        "investments": data.get("investments", {}),
        "returnRates": data.get("returnRates", {}),
    }
