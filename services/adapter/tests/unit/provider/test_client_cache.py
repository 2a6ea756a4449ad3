import threading
import time

import pytest
from conftest import FakeCirconusClient

from circonus_adapter.core.errors import ClientConstructionError
from circonus_adapter.infrastructure.circonus.client import CirconusClient
from circonus_adapter.provider.client_cache import ClientCache


def test_returns_cached_client():
    built = []

    def factory(credential, url):
        built.append(credential)
        return FakeCirconusClient()

    cache = ClientCache(factory=factory)
    first = cache.get_or_create("cred-a", "https://api.test")
    second = cache.get_or_create("cred-a", "https://api.test")

    assert first is second
    assert built == ["cred-a"]
    assert "cred-a" in cache
    assert len(cache) == 1


def test_distinct_credentials_get_distinct_clients():
    cache = ClientCache(factory=lambda credential, url: FakeCirconusClient())
    a = cache.get_or_create("cred-a", "https://api.test")
    b = cache.get_or_create("cred-b", "https://api.test")
    assert a is not b
    assert len(cache) == 2


def test_construction_failure_is_not_cached():
    attempts = []

    def factory(credential, url):
        attempts.append(credential)
        if len(attempts) == 1:
            raise ClientConstructionError("transient")
        return FakeCirconusClient()

    cache = ClientCache(factory=factory)
    with pytest.raises(ClientConstructionError):
        cache.get_or_create("cred-a", "https://api.test")
    assert "cred-a" not in cache

    client = cache.get_or_create("cred-a", "https://api.test")
    assert isinstance(client, FakeCirconusClient)
    assert attempts == ["cred-a", "cred-a"]


def test_concurrent_first_use_builds_one_client():
    built = []
    barrier = threading.Barrier(8)

    def factory(credential, url):
        built.append(credential)
        time.sleep(0.05)
        return FakeCirconusClient()

    cache = ClientCache(factory=factory)
    results = []

    def worker():
        barrier.wait()
        results.append(cache.get_or_create("cred-a", "https://api.test"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(built) == 1
    assert len({id(r) for r in results}) == 1


def test_default_factory_builds_circonus_client():
    cache = ClientCache()
    client = cache.get_or_create("0a1b2c3d-token", "https://api.circonus.test/v2")
    assert isinstance(client, CirconusClient)
    assert client.api_url == "https://api.circonus.test/v2"
    cache.close()


def test_default_factory_rejects_empty_credential():
    cache = ClientCache()
    with pytest.raises(ClientConstructionError):
        cache.get_or_create("", "https://api.circonus.test/v2")
    assert len(cache) == 0


def test_close_closes_all_clients():
    clients = []

    def factory(credential, url):
        c = FakeCirconusClient()
        clients.append(c)
        return c

    cache = ClientCache(factory=factory)
    cache.get_or_create("a", "https://api.test")
    cache.get_or_create("b", "https://api.test")
    cache.close()

    assert all(c.closed for c in clients)
    assert len(cache) == 0
