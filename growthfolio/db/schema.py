"""DuckDB schema definitions for growthfolio.

One table, ``portfolios``, holds the latest snapshot per user. The two
halves of a snapshot are stored as JSON text so that new products need
no schema change.
"""

from __future__ import annotations

# ── Portfolios ──

CREATE_PORTFOLIOS = """
CREATE TABLE IF NOT EXISTS portfolios (
    user_id       VARCHAR PRIMARY KEY,
    investments   VARCHAR NOT NULL,
    return_rates  VARCHAR NOT NULL,
    updated_at    TIMESTAMP DEFAULT current_timestamp
);
"""

# All DDL statements in creation order
ALL_TABLES: list[str] = [
    CREATE_PORTFOLIOS,
]
