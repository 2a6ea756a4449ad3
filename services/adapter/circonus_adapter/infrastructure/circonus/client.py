from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from circonus_adapter.core.config import settings
from circonus_adapter.core.errors import BackendError, ClientConstructionError
from circonus_adapter.core.logger import get_logger

logger = get_logger("circonus_client")

CAQL_PATH = "/caql"


class CirconusClient:
    """Minimal Circonus API client bound to one API token.

    Only the read-only ``GET`` used for CAQL fetches is implemented. Each
    client owns a ``requests.Session`` so connections are pooled per token.
    """

    def __init__(
        self,
        api_url: str,
        token_key: str,
        app_name: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        if not token_key or any(c.isspace() for c in token_key):
            raise ClientConstructionError(
                "API Token is required and must not contain whitespace"
            )
        parsed = urlparse(api_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ClientConstructionError(f"invalid Circonus API URL {api_url!r}")

        self.api_url = api_url.rstrip("/")
        self.app_name = app_name or settings.circonus_app_name
        self.timeout = (
            timeout
            if timeout is not None
            else settings.circonus_request_timeout_seconds
        )
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "X-Circonus-Auth-Token": token_key,
                "X-Circonus-App-Name": self.app_name,
            }
        )

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: float | None = None,
    ) -> bytes:
        """GET ``path`` relative to the API URL and return the raw body."""
        url = f"{self.api_url}{path}"
        try:
            response = self._session.get(
                url,
                params=params,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.Timeout as e:
            raise BackendError(f"Circonus API request to {path} timed out: {e}") from e
        except requests.RequestException as e:
            raise BackendError(f"Circonus API request to {path} failed: {e}") from e

        if not response.ok:
            logger.warning(
                "circonus_api_error_status",
                extra={"path": path, "status_code": response.status_code},
            )
            raise BackendError(
                f"Circonus API returned {response.status_code} for {path}: "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )
        return response.content

    def caql(
        self,
        query: str,
        start: int,
        end: int,
        period: int,
        timeout: float | None = None,
    ) -> bytes:
        """Fetch a CAQL time series between two epoch-second boundaries."""
        params = {
            "period": period,
            "start": start,
            "end": end,
            "query": query,
        }
        return self.get(CAQL_PATH, params=params, timeout=timeout)

    def close(self):
        self._session.close()
