"""Debounced autosave for portfolio snapshots.

Every mutation of a session's store schedules a save; bursts of edits
within ``delay`` seconds coalesce into a single write of the newest
snapshot. A failed write is logged and kept in ``last_error``. It never
propagates back into the caller that made the edit, because the
in-memory store stays the source of truth.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

SaveFn = Callable[[str, dict[str, Any]], None]


class DebouncedSaver:
    """Coalesce snapshot saves and write the latest one after a quiet period.

    Attributes:
        save_fn: Called as ``save_fn(user_id, snapshot)`` to persist.
        delay: Quiet period in seconds before a scheduled save fires.
        last_error: The exception raised by the most recent failed save,
            or None after a successful one.

    """

    def __init__(self, save_fn: SaveFn, delay: float = 1.0) -> None:
        self.save_fn = save_fn
        self.delay = delay
        self.last_error: Exception | None = None
        self._lock = threading.Lock()
        # Held for the whole of a save_fn call.
        self._write_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[str, dict[str, Any]] | None = None

    @property
    def pending(self) -> bool:
        """Whether a save is scheduled but not yet written."""
        with self._lock:
            return self._pending is not None

    def schedule(self, user_id: str | None, snapshot: dict[str, Any]) -> None:
        """Schedule a save, replacing any save still waiting.

        Anonymous sessions (``user_id`` None) are ignored.
        """
        if user_id is None:
            return
        with self._lock:
            self._pending = (user_id, snapshot)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> bool:
        """Write the pending snapshot now.

        Waits for a save already running on the timer thread before
        returning, so the store is quiescent afterwards.

        Returns:
            True if a pending snapshot was written successfully, False
            if nothing was pending or the write failed.

        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        return self._fire()

    def cancel(self) -> None:
        """Drop the pending save and wait for any save already running."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
        with self._write_lock:
            pass

    def _fire(self) -> bool:
        with self._write_lock:
            with self._lock:
                pending = self._pending
                self._pending = None
                self._timer = None
            if pending is None:
                return False

            user_id, snapshot = pending
            try:
                self.save_fn(user_id, snapshot)
            except Exception as exc:  # noqa: BLE001 — save failures are reported, never raised into the session
                self.last_error = exc
                logger.exception("Autosave failed for user %s", user_id)
                return False
            self.last_error = None
            logger.debug("Autosaved portfolio for user %s", user_id)
            return True
