from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.constants import DEFAULT_SYNC_INTERVAL_MINUTES
from .engine import MirrorSyncEngine

logger = logging.getLogger(__name__)


class PeriodicSync:
    """Runs ``sync_all`` on a daemon thread: once at start, then every interval."""

    def __init__(self, engine: MirrorSyncEngine):
        self._engine = engine
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval_minutes: float = DEFAULT_SYNC_INTERVAL_MINUTES) -> None:
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")

        self.stop()
        with self._lock:
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._loop,
                args=(interval_minutes * 60, stop_event),
                name="mirror-sync",
                daemon=True,
            )
            self._stop_event, self._thread = stop_event, thread
            thread.start()
        logger.info("Auto-sync enabled (every %s minutes)", interval_minutes)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = self._stop_event = None
        if thread is None:
            return
        stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Auto-sync disabled")

    def _loop(self, interval_seconds: float, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                result = self._engine.sync_all()
                if not result.success:
                    logger.warning("Scheduled mirror sync failed: %s", result.error)
            except Exception:
                logger.exception("Scheduled mirror sync crashed")
            if stop_event.wait(interval_seconds):
                break
