from __future__ import annotations

import logging
import threading

from drunkirk.game_store import PersistedDocument, SettingsStore


logger = logging.getLogger(__name__)


class DebouncedSaver:
    """Coalesce bursts of saves into one write after a quiet period.

    Every `schedule()` replaces the pending document and restarts the timer,
    so only the latest snapshot is written. Failures are logged and dropped:
    the in-memory state stays authoritative.
    """

    def __init__(self, store: SettingsStore, *, delay_s: float = 0.3):
        self.store = store
        self.delay_s = delay_s
        self._lock = threading.RLock()
        # Held for the duration of a store write.
        self._write_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: PersistedDocument | None = None
        # Bumped by cancel(); writes taken under an older generation are dropped.
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, doc: PersistedDocument) -> None:
        with self._lock:
            self._pending = doc
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay_s, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop the pending document and wait out a write already in progress.

        Once this returns no earlier document can reach the store, so a
        following `store.clear()` stays cleared.
        """

        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

        with self._write_lock:
            pass

    def flush(self) -> None:
        """Write the pending document now, if any."""

        with self._lock:
            doc = self._pending
            generation = self._generation
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None

        if doc is None:
            return

        with self._write_lock:
            with self._lock:
                if generation != self._generation:
                    return
            try:
                self.store.save(doc)
            except Exception:
                logger.exception("background settings save failed")
