from __future__ import annotations

import threading
from typing import Callable, Dict

from circonus_adapter.core.logger import get_logger
from circonus_adapter.infrastructure.circonus.client import CirconusClient

from .metrics import CLIENTS_CACHED

logger = get_logger("client_cache")

ClientFactory = Callable[[str, str], CirconusClient]


def _default_factory(credential_id: str, backend_url: str) -> CirconusClient:
    return CirconusClient(api_url=backend_url, token_key=credential_id)


class ClientCache:
    """Lazily built Circonus clients, one per credential.

    Clients live for the lifetime of the process; there is no eviction. A
    revoked credential keeps failing at query time until the configuration
    that references it is replaced.
    """

    def __init__(self, factory: ClientFactory | None = None):
        self._factory = factory or _default_factory
        self._clients: Dict[str, CirconusClient] = {}
        self._lock = threading.Lock()

    def get_or_create(self, credential_id: str, backend_url: str) -> CirconusClient:
        client = self._clients.get(credential_id)
        if client is not None:
            return client
        with self._lock:
            # Another thread may have built it while we waited
            client = self._clients.get(credential_id)
            if client is not None:
                return client
            # Built under the lock; construction does no I/O, so other credentials
            # wait only briefly. Raises on invalid credentials and caches nothing.
            client = self._factory(credential_id, backend_url)
            self._clients[credential_id] = client
            CLIENTS_CACHED.set(len(self._clients))
        logger.info(
            "circonus_client_created",
            extra={"backend_url": backend_url, "clients": len(self)},
        )
        return client

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, credential_id: object) -> bool:
        return credential_id in self._clients

    def close(self):
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
            CLIENTS_CACHED.set(0)
        for client in clients:
            try:
                client.close()
            except Exception as e:  # noqa: BLE001
                logger.warning("circonus_client_close_failed", extra={"error": str(e)})
