"""growthfolio sidecar entry point.

Communicates with a host process via stdin/stdout using
newline-delimited JSON messages.

Protocol:
    Request:  {"id": "uuid", "method": "string", "params": {}}
    Response: {"id": "uuid", "result": {}}
    Error:    {"id": "uuid", "error": {"message": "string", "traceback": "string"}}

All portfolio state lives in a ``Session`` created by ``main()`` and
passed to every handler; the module holds no state of its own.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from typing import TYPE_CHECKING, Any

from growthfolio import log_config
from growthfolio.config import DEFAULT_HORIZON_YEARS, PRODUCT_CATALOG, autosave_delay
from growthfolio.db.connection import init_portfolio_db
from growthfolio.db.snapshot_store import fetch_snapshot, upsert_snapshot
from growthfolio.export.csv_export import export_detailed_csv, export_summary_csv
from growthfolio.export.json_export import SnapshotEncoder, export_snapshot_json
from growthfolio.ingest.csv_import import parse_detailed_csv
from growthfolio.portfolio.models import NUMERIC_FIELDS, coerce_amount
from growthfolio.portfolio.store import PortfolioStore
from growthfolio.projection.engine import (
    aggregate,
    future_value,
    project_product,
    projection_schedule,
    total_invested,
    total_return_percent,
    validate_horizon,
)
from growthfolio.sync.autosave import DebouncedSaver

if TYPE_CHECKING:
    import duckdb
    import numpy as np
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


class Session:
    """State for one connected user: the store plus its persistence.

    Attributes:
        store: The user's portfolio.
        conn: DuckDB connection for snapshots, or None to disable saving.
        user_id: Opaque id of the signed-in user, None when anonymous.
        saver: Debounced autosave, present only when conn is set.

    """

    def __init__(
        self,
        store: PortfolioStore | None = None,
        conn: duckdb.DuckDBPyConnection | None = None,
        delay: float | None = None,
    ) -> None:
        self.store = store if store is not None else PortfolioStore()
        self.conn = conn
        self.user_id: str | None = None
        self.saver: DebouncedSaver | None = None
        if conn is not None:
            self.saver = DebouncedSaver(
                self._write, autosave_delay() if delay is None else delay
            )

    def _write(self, user_id: str, snapshot: dict[str, Any]) -> None:
        # Called from the autosave timer thread: one cursor per thread.
        cursor = self.conn.cursor()  # type: ignore[union-attr]
        try:
            upsert_snapshot(cursor, user_id, snapshot)
        finally:
            cursor.close()

    def changed(self) -> None:
        """Schedule an autosave after a mutation of the store."""
        if self.saver is not None:
            self.saver.schedule(self.user_id, self.store.snapshot())

    def login(self, user_id: str) -> dict[str, Any]:
        """Switch to a signed-in user and load their stored portfolio.

        A user with no stored portfolio keeps the current in-memory
        state, which is saved on the next change.
        """
        if self.saver is not None:
            self.saver.flush()
        self.user_id = user_id

        restored = False
        if self.conn is not None:
            snapshot = fetch_snapshot(self.conn, user_id)
            if snapshot is not None:
                self.store.restore(snapshot)
                restored = True
        logger.info("User %s signed in (restored=%s)", user_id, restored)
        return {"userId": user_id, "restored": restored}

    def logout(self) -> dict[str, Any]:
        """Flush pending saves and continue anonymously."""
        if self.saver is not None:
            self.saver.flush()
        logger.info("User %s signed out", self.user_id)
        self.user_id = None
        return {"userId": None}

    def save(self) -> dict[str, Any]:
        """Write the current snapshot immediately.

        Raises:
            ValueError: If the session is anonymous or has no database.

        """
        if self.user_id is None:
            msg = "Cannot save: no user is signed in"
            raise ValueError(msg)
        if self.conn is None:
            msg = "Cannot save: persistence is not configured"
            raise ValueError(msg)
        if self.saver is not None:
            self.saver.cancel()
        upsert_snapshot(self.conn, self.user_id, self.store.snapshot())
        return {"saved": True}

    def close(self) -> None:
        if self.saver is not None:
            self.saver.flush()
        if self.conn is not None:
            self.conn.close()


# ── Portfolio handlers ──


def _handle_add_entry(session: Session, product: str) -> dict[str, Any] | None:
    entry = session.store.add_entry(product)
    if entry is None:
        return None
    session.changed()
    return entry.to_dict()


def _handle_remove_entry(session: Session, product: str, entry_id: str) -> bool:
    removed = session.store.remove_entry(product, entry_id)
    if removed:
        session.changed()
    return removed


def _handle_update_entry(
    session: Session,
    product: str,
    entry_id: str,
    field: str,
    value: Any,
) -> bool:
    if field in NUMERIC_FIELDS:
        value = coerce_amount(value)
    elif field == "name":
        value = "" if value is None else str(value)
    updated = session.store.update_entry(product, entry_id, field, value)
    if updated:
        session.changed()
    return updated


def _handle_update_return_rate(session: Session, product: str, rate: Any) -> float:
    coerced = coerce_amount(rate)
    session.store.update_return_rate(product, coerced)
    session.changed()
    return coerced


def _handle_product_totals(session: Session, product: str) -> dict[str, float]:
    return session.store.get_product_totals(product).to_dict()


def _handle_products(session: Session) -> list[dict[str, Any]]:
    """Describe every product: catalog metadata, rate, totals, entries."""
    profiles = {p.name: p for p in PRODUCT_CATALOG}
    result: list[dict[str, Any]] = []
    for name in session.store.products():
        profile = profiles.get(name)
        result.append(
            {
                "name": name,
                "slug": profile.slug if profile else None,
                "riskLevel": profile.risk_level if profile else None,
                "riskLabel": profile.risk_label if profile else None,
                "volatility": profile.volatility if profile else None,
                "description": profile.description if profile else None,
                "baselineRate": profile.baseline_rate if profile else None,
                "returnRate": session.store.return_rate(name),
                **session.store.get_product_totals(name).to_dict(),
                "entries": [e.to_dict() for e in session.store.entries(name)],
            }
        )
    return result


def _handle_snapshot(session: Session) -> dict[str, Any]:
    return session.store.snapshot()


def _handle_restore(session: Session, snapshot: dict[str, Any]) -> bool:
    session.store.restore(snapshot)
    session.changed()
    return True


# ── Projection handlers ──


def _handle_future_value(
    session: Session,  # noqa: ARG001 — uniform handler signature
    initial: float,
    annual: float,
    rate: float,
    years: float,
) -> dict[str, float]:
    return {
        "futureValue": future_value(initial, annual, rate, years),
        "totalInvested": total_invested(initial, annual, years),
        "totalReturnPercent": total_return_percent(initial, annual, rate, years),
    }


def _handle_project_product(
    session: Session,
    product: str,
    years: int = DEFAULT_HORIZON_YEARS,
) -> dict[str, Any]:
    years = validate_horizon(years)
    totals = session.store.get_product_totals(product)
    rate = session.store.return_rate(product)
    projection = project_product(totals.total_initial, totals.total_annual, rate, years)
    return {
        "product": product,
        "years": years,
        "returnRate": rate,
        **totals.to_dict(),
        **projection.to_dict(),
    }


def _handle_schedule(
    session: Session,
    product: str,
    years: int = DEFAULT_HORIZON_YEARS,
) -> NDArray[np.float64]:
    years = validate_horizon(years)
    totals = session.store.get_product_totals(product)
    rate = session.store.return_rate(product)
    return projection_schedule(totals.total_initial, totals.total_annual, rate, years)


def _handle_aggregate(
    session: Session,
    years: int = DEFAULT_HORIZON_YEARS,
) -> dict[str, float]:
    years = validate_horizon(years)
    result = aggregate(
        session.store.all_product_totals(),
        session.store.effective_rates(),
        years,
    )
    return result.to_dict()


# ── Session handlers ──


def _handle_login(session: Session, user_id: str) -> dict[str, Any]:
    return session.login(user_id)


def _handle_logout(session: Session) -> dict[str, Any]:
    return session.logout()


def _handle_save(session: Session) -> dict[str, Any]:
    return session.save()


# ── Export / import handlers ──


def _handle_summary_csv(
    session: Session,
    years: int = DEFAULT_HORIZON_YEARS,
    output_path: str | None = None,
) -> str:
    return export_summary_csv(session.store, validate_horizon(years), output_path)


def _handle_detailed_csv(session: Session, output_path: str | None = None) -> str:
    return export_detailed_csv(session.store, output_path)


def _handle_snapshot_json(session: Session, output_path: str | None = None) -> str:
    return export_snapshot_json(session.store.snapshot(), output_path)


def _handle_import_csv(
    session: Session,
    file_path: str | None = None,
    csv_content: str | None = None,
) -> dict[str, Any]:
    investments = parse_detailed_csv(file_path=file_path, csv_content=csv_content)
    session.store.restore({"investments": investments})
    session.changed()
    return session.store.snapshot()


HANDLERS: dict[str, Any] = {
    # Portfolio state
    "portfolio.add_entry": _handle_add_entry,
    "portfolio.remove_entry": _handle_remove_entry,
    "portfolio.update_entry": _handle_update_entry,
    "portfolio.update_return_rate": _handle_update_return_rate,
    "portfolio.product_totals": _handle_product_totals,
    "portfolio.products": _handle_products,
    "portfolio.snapshot": _handle_snapshot,
    "portfolio.restore": _handle_restore,
    # Projections
    "projection.future_value": _handle_future_value,
    "projection.product": _handle_project_product,
    "projection.schedule": _handle_schedule,
    "projection.aggregate": _handle_aggregate,
    # Identity and persistence
    "session.login": _handle_login,
    "session.logout": _handle_logout,
    "session.save": _handle_save,
    # Export / import
    "export.summary_csv": _handle_summary_csv,
    "export.detailed_csv": _handle_detailed_csv,
    "export.snapshot_json": _handle_snapshot_json,
    "ingest.detailed_csv": _handle_import_csv,
}


def dispatch(session: Session, method: str, params: dict[str, Any]) -> Any:
    """Route a method call to the appropriate handler.

    Args:
        session: The session the call operates on.
        method: The method name (e.g., "projection.aggregate").
        params: The parameters for the method.

    Returns:
        The result of the method call.

    Raises:
        ValueError: If the method is not recognized.

    """
    if method not in HANDLERS:
        msg = f"Unknown method: {method}"
        raise ValueError(msg)
    return HANDLERS[method](session, **params)


def main(session: Session | None = None) -> None:
    """Run the sidecar message loop.

    Reads newline-delimited JSON from stdin, dispatches to handlers,
    and writes JSON responses to stdout. Runs until stdin is closed.

    Args:
        session: Session to serve. Defaults to a fresh portfolio backed
            by the on-disk database.

    """
    log_config.setup()
    if session is None:
        session = Session(conn=init_portfolio_db())

    try:
        for raw_line in sys.stdin:
            stripped = raw_line.strip()
            if not stripped:
                continue

            request: dict[str, Any] = {}
            try:
                request = json.loads(stripped)
                request_id = request.get("id", "unknown")
                method = request["method"]
                params = request.get("params", {})
                result = dispatch(session, method, params)
                response: dict[str, Any] = {"id": request_id, "result": result}
            except Exception as exc:  # noqa: BLE001 — dispatcher must catch all errors and return them as JSON
                request_id = (
                    request.get("id", "unknown") if isinstance(request, dict) else "unknown"
                )
                logger.debug("Request %s failed: %s", request_id, exc)
                response = {
                    "id": request_id,
                    "error": {
                        "message": str(exc),
                        "traceback": traceback.format_exc(),
                    },
                }
            sys.stdout.write(json.dumps(response, cls=SnapshotEncoder) + "\n")
            sys.stdout.flush()
    finally:
        session.close()


if __name__ == "__main__":
    main()
