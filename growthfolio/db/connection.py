"""DuckDB connection management for growthfolio.

Handles database initialization, schema creation, and connection
lifecycle. Portfolios live in a single file under the data directory::

    ~/.growthfolio/
      data/
        portfolio.duckdb

"""

from __future__ import annotations

import logging
from pathlib import Path

import duckdb

from growthfolio.config import data_dir
from growthfolio.db.schema import ALL_TABLES

logger = logging.getLogger(__name__)


def get_connection(
    db_path: str | Path | None = None,
) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection.

    Args:
        db_path: Path to the .duckdb file. If None, uses in-memory database.

    Returns:
        Active DuckDB connection.

    """
    if db_path is None:
        return duckdb.connect(":memory:")

    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path))


def init_portfolio_db(
    db_path: str | Path | None = None,
) -> duckdb.DuckDBPyConnection:
    """Initialize the portfolio database with schema.

    Args:
        db_path: Path to the portfolio.duckdb file.
            Defaults to ``config.data_dir() / "portfolio.duckdb"``.

    Returns:
        Initialized DuckDB connection.

    """
    if db_path is None:
        db_path = data_dir() / "portfolio.duckdb"

    conn = get_connection(db_path)
    for ddl in ALL_TABLES:
        conn.execute(ddl)
    logger.info("Portfolio database initialized at %s", db_path)
    return conn


def init_memory_db() -> duckdb.DuckDBPyConnection:
    """Create an in-memory database with full schema.

    Useful for testing and anonymous sessions.

    Returns:
        In-memory DuckDB connection with all tables created.

    """
    conn = get_connection(None)
    for ddl in ALL_TABLES:
        conn.execute(ddl)
    return conn
