import threading
import time

from circonus_adapter.infrastructure.configsource.sources import StaticConfigSource
from circonus_adapter.provider.config_store import ConfigStore
from circonus_adapter.provider.refresher import ConfigRefresher


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class FlakySource:
    """Fails the first ``failures`` fetches, then delegates."""

    def __init__(self, inner, failures):
        self.inner = inner
        self.failures = failures
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("source unavailable")
        return self.inner.fetch()


def test_refresh_once_applies_source(static_source):
    store = ConfigStore()
    ready = threading.Event()
    refresher = ConfigRefresher(store, static_source, interval_seconds=60, ready_event=ready)

    assert refresher.refresh_once() is True
    assert store.lookup("default", "http-requests") is not None
    assert ready.is_set()
    assert refresher.last_success is not None


def test_refresh_once_survives_source_failure(static_source):
    store = ConfigStore()
    ready = threading.Event()
    refresher = ConfigRefresher(
        store, FlakySource(static_source, failures=1), interval_seconds=60, ready_event=ready
    )

    assert refresher.refresh_once() is False
    assert not ready.is_set()
    assert refresher.refresh_once() is True
    assert ready.is_set()


def test_background_loop_picks_up_changes(sample_config):
    source = StaticConfigSource()
    store = ConfigStore()
    refresher = ConfigRefresher(store, FlakySource(source, failures=2), interval_seconds=0.01)
    refresher.start()
    try:
        assert refresher.running
        source.put("default", "cfg", sample_config)
        assert wait_for(lambda: store.lookup("default", "queue-depth") is not None)

        source.put("default", "cfg", sample_config.replace("queue-depth", "queue-size"))
        assert wait_for(lambda: store.lookup("default", "queue-size") is not None)
    finally:
        refresher.stop()

    assert not refresher.running


def test_start_is_idempotent(static_source):
    refresher = ConfigRefresher(ConfigStore(), static_source, interval_seconds=0.01)
    refresher.start()
    first = refresher._thread
    refresher.start()
    try:
        assert refresher._thread is first
    finally:
        refresher.stop()
