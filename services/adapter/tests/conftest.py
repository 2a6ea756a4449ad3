import json
from datetime import datetime, timezone

import pytest

from circonus_adapter.infrastructure.configsource.sources import StaticConfigSource
from circonus_adapter.provider.client_cache import ClientCache
from circonus_adapter.provider.config_store import ConfigStore
from circonus_adapter.provider.executor import QueryExecutor

SAMPLE_CONFIG = """
queries:
  - caql: "find('http_requests', 'and(service:web)') | stats:mean()"
    circonus_api_key: 0a1b2c3d-0000-4000-8000-000000000001
    external_name: http-requests
    window: 5m
    stride: 1m
    aggregate: average
  - caql: "find('queue_depth') | stats:max()"
    circonus_api_key: 0a1b2c3d-0000-4000-8000-000000000002
    external_name: queue-depth
    window: 10m
    stride: 30s
    aggregate: max
"""


class FakeCirconusClient:
    """Stands in for CirconusClient; records every CAQL call."""

    def __init__(self, body: bytes | None = None, exc: Exception | None = None):
        self.body = body
        self.exc = exc
        self.calls: list[dict] = []
        self.closed = False

    def caql(self, query, start, end, period, timeout=None):
        self.calls.append(
            {
                "query": query,
                "start": start,
                "end": end,
                "period": period,
                "timeout": timeout,
            }
        )
        if self.exc is not None:
            raise self.exc
        return self.body

    def close(self):
        self.closed = True


def caql_body(points) -> bytes:
    return json.dumps({"_data": points}).encode()


@pytest.fixture
def sample_config():
    return SAMPLE_CONFIG


@pytest.fixture
def static_source(sample_config):
    source = StaticConfigSource()
    source.put("default", "circonus-adapter-config", sample_config)
    return source


@pytest.fixture
def store(static_source):
    s = ConfigStore()
    s.refresh(static_source)
    return s


@pytest.fixture
def fake_client():
    return FakeCirconusClient(body=caql_body([[100, [5.0]]]))


@pytest.fixture
def client_cache(fake_client):
    return ClientCache(factory=lambda credential, url: fake_client)


@pytest.fixture
def fixed_now():
    return datetime.fromtimestamp(200, tz=timezone.utc)


@pytest.fixture
def executor(store, client_cache, fixed_now):
    return QueryExecutor(
        store,
        client_cache,
        api_url="https://api.circonus.test/v2",
        clock=lambda: fixed_now,
        default_timeout=2.5,
    )
