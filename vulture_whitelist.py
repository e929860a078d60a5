"""Vulture whitelist — references that appear unused but are called dynamically.

Vulture scans for unreachable code.  Items listed here are known false
positives: entry points invoked by setuptools, pytest fixtures consumed
via dependency injection, handlers reached only through the dispatch
table, etc.

Usage:
    vulture growthfolio tests vulture_whitelist.py
"""

# ── Entry points (called by setuptools console_scripts, not imported) ──
from growthfolio.main import main  # noqa: F401

# ── Pytest fixtures (injected by pytest, never called directly) ──
from tests.conftest import seeded_store  # noqa: F401
from tests.conftest import memory_db  # noqa: F401
from tests.conftest import two_entry_store  # noqa: F401

# ── JSON encoder hook (called by json.dumps, not user code) ──
from growthfolio.export.json_export import SnapshotEncoder  # noqa: F401

SnapshotEncoder.default  # noqa: B018
