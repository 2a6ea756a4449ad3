from __future__ import annotations

import threading
import time

from circonus_adapter.core.config import settings
from circonus_adapter.core.logger import get_logger

from .config_store import ConfigSource, ConfigStore
from .metrics import CONFIG_REFRESH_TOTAL

logger = get_logger("config_refresher")


class ConfigRefresher:
    """Background thread keeping a ConfigStore in sync with its source.

    Refreshes run every ``interval_seconds`` for the lifetime of the process.
    A failing refresh is logged and retried on the next tick; it never stops
    the loop.
    """

    def __init__(
        self,
        store: ConfigStore,
        source: ConfigSource,
        interval_seconds: float | None = None,
        ready_event: threading.Event | None = None,
    ):
        self._store = store
        self._source = source
        self._interval = (
            interval_seconds
            if interval_seconds is not None
            else settings.config_refresh_interval_seconds
        )
        self._ready_event = ready_event
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._refreshes = 0
        self.last_success: float | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop, name="config-refresher", daemon=True
        )
        self._thread.start()
        logger.info("config_refresher_started", extra={"interval": self._interval})

    def _run_loop(self):
        while not self._stop_event.wait(self._interval):
            self.refresh_once()

    def refresh_once(self) -> bool:
        """Run one refresh; returns False when it failed."""
        try:
            applied = self._store.refresh(self._source)
        except Exception as e:  # noqa: BLE001 - the loop must outlive any source failure
            CONFIG_REFRESH_TOTAL.labels(outcome="error").inc()
            logger.error(
                "config_refresh_failed",
                extra={"error_type": type(e).__name__, "error": str(e)},
            )
            return False

        self._refreshes += 1
        self.last_success = time.time()
        CONFIG_REFRESH_TOTAL.labels(outcome="ok").inc()
        if self._ready_event is not None:
            self._ready_event.set()
        if applied:
            logger.info(
                "config_refresh_applied",
                extra={
                    "objects_applied": applied,
                    "metrics": len(self._store.snapshot().definitions),
                },
            )
        return True

    def stop(self, timeout: float = 5.0):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
        logger.info("config_refresher_stopped", extra={"refreshes": self._refreshes})
