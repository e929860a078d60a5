"""Portfolio snapshot store — DuckDB fetch/upsert keyed by user id.

Each user has at most one row holding their latest snapshot. The store
knows nothing about how snapshots are produced; it only round-trips the
``{"investments": ..., "returnRates": ...}`` shape.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import duckdb

logger = logging.getLogger(__name__)


def _require_user_id(user_id: str) -> None:
    if not user_id:
        msg = "user_id is required; anonymous portfolios are not persisted"
        raise ValueError(msg)


def upsert_snapshot(
    conn: duckdb.DuckDBPyConnection,
    user_id: str,
    snapshot: dict[str, Any],
) -> None:
    """Insert or replace the stored snapshot for a user.

    Args:
        conn: Active DuckDB connection.
        user_id: Opaque user identifier.
        snapshot: Dict with "investments" and "returnRates" keys.

    Raises:
        ValueError: If user_id is empty.

    """
    _require_user_id(user_id)
    now = datetime.now(tz=UTC).replace(tzinfo=None)

    conn.execute(
        """
        INSERT OR REPLACE INTO portfolios
            (user_id, investments, return_rates, updated_at)
        VALUES (?, ?, ?, ?)
        """,
        [
            user_id,
            json.dumps(snapshot.get("investments", {})),
            json.dumps(snapshot.get("returnRates", {})),
            now,
        ],
    )
    logger.info("Saved portfolio snapshot for user %s", user_id)


def fetch_snapshot(
    conn: duckdb.DuckDBPyConnection,
    user_id: str,
) -> dict[str, Any] | None:
    """Fetch the stored snapshot for a user.

    Args:
        conn: Active DuckDB connection.
        user_id: Opaque user identifier.

    Returns:
        Snapshot dict, or None if the user has no stored portfolio.

    """
    _require_user_id(user_id)
    row = conn.execute(
        "SELECT investments, return_rates FROM portfolios WHERE user_id = ?",
        [user_id],
    ).fetchone()
    if row is None:
        logger.debug("No stored portfolio for user %s", user_id)
        return None

    investments, return_rates = row
    return {
        "investments": json.loads(investments),
        "returnRates": json.loads(return_rates),
    }


def delete_snapshot(conn: duckdb.DuckDBPyConnection, user_id: str) -> None:
    """Delete the stored snapshot for a user, if any."""
    _require_user_id(user_id)
    conn.execute("DELETE FROM portfolios WHERE user_id = ?", [user_id])


def get_updated_at(
    conn: duckdb.DuckDBPyConnection,
    user_id: str,
) -> datetime | None:
    """Return when a user's snapshot was last written, or None."""
    row = conn.execute(
        "SELECT updated_at FROM portfolios WHERE user_id = ?",
        [user_id],
    ).fetchone()
    return row[0] if row else None


class SnapshotRepository:
    """Record store bound to one connection, with ``fetch``/``upsert``."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self.conn = conn

    def fetch(self, user_id: str) -> dict[str, Any] | None:
        return fetch_snapshot(self.conn, user_id)

    def upsert(self, user_id: str, snapshot: dict[str, Any]) -> None:
        upsert_snapshot(self.conn, user_id, snapshot)

    def delete(self, user_id: str) -> None:
        delete_snapshot(self.conn, user_id)
