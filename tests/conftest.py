"""Shared pytest fixtures for growthfolio tests."""

from __future__ import annotations

import pytest
from growthfolio.db.connection import init_memory_db
from growthfolio.portfolio.models import InvestmentEntry
from growthfolio.portfolio.store import PortfolioStore


@pytest.fixture
def seeded_store() -> PortfolioStore:
    """Provide a store in its deterministic initial state."""
    return PortfolioStore()


@pytest.fixture
def two_entry_store() -> PortfolioStore:
    """Provide a single-product store with a lump sum and a contribution.

    Savings: {5000, 0} and {0, 200} at 10%.
    """
    return PortfolioStore(
        investments={
            "Savings": [
                InvestmentEntry(id="a", name="Lump", initial=5000.0, annual=0.0),
                InvestmentEntry(id="b", name="Monthly", initial=0.0, annual=200.0),
            ],
        },
        return_rates={"Savings": 10.0},
    )


@pytest.fixture
def memory_db():
    conn = init_memory_db()
    yield conn
    conn.close()
