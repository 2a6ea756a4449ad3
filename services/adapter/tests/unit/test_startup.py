import threading

from circonus_adapter.core.config import settings
from circonus_adapter.infrastructure.configsource.sources import DirectoryConfigSource
from circonus_adapter.provider.config_store import ConfigStore
from circonus_adapter.startup import build_config_source, load_initial_configuration


class BrokenSource:
    def __init__(self):
        self.calls = 0

    def fetch(self):
        self.calls += 1
        raise ConnectionError("config source unavailable")


def test_initial_load_sets_ready(static_source):
    store = ConfigStore()
    ready = threading.Event()

    assert load_initial_configuration(store, static_source, ready) is True
    assert ready.is_set()
    assert store.list_names() == ["default/http-requests", "default/queue-depth"]


def test_initial_load_failure_is_not_fatal(monkeypatch):
    monkeypatch.setattr(settings, "config_initial_load_retries", 2)
    monkeypatch.setattr(settings, "config_initial_load_base_delay_seconds", 0.0)
    store = ConfigStore()
    ready = threading.Event()
    source = BrokenSource()

    assert load_initial_configuration(store, source, ready) is False
    assert not ready.is_set()
    assert source.calls == 2
    assert store.list_names() == []


def test_build_config_source_uses_directory(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "config_directory", str(tmp_path))
    source = build_config_source()
    assert isinstance(source, DirectoryConfigSource)
    assert source.root == tmp_path
