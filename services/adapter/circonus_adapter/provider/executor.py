from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from circonus_adapter.core.config import settings
from circonus_adapter.core.errors import (
    AdapterError,
    FutureTimestampError,
    NoDatapointsError,
)
from circonus_adapter.core.logger import get_logger
from circonus_adapter.domain.models import (
    ExternalMetricInfo,
    ResolvedMetric,
    TimeSeriesPoint,
)
from circonus_adapter.infrastructure.circonus.schemas import decode_caql_response

from .client_cache import ClientCache
from .config_store import ConfigStore
from .metrics import BACKEND_QUERY_LATENCY_SECONDS, RESOLVE_REQUESTS_TOTAL

logger = get_logger("query_executor")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def aggregate_points(
    points: Iterable[Optional[TimeSeriesPoint]], end_epoch: float
) -> tuple[float, float]:
    """Average ``values[0]`` over the usable points.

    Returns ``(value, latest_timestamp)``. Null points and points without a
    first value are skipped. A point stamped after ``end_epoch`` means the
    backend and our clock disagree, so the whole series is rejected.
    """
    total = 0.0
    count = 0
    latest: Optional[float] = None
    for point in points:
        if point is None:
            continue
        if point.timestamp > end_epoch:
            raise FutureTimestampError(point.timestamp, end_epoch)
        value = point.value
        if value is None:
            continue
        total += value
        count += 1
        if latest is None or point.timestamp > latest:
            latest = point.timestamp

    if count == 0 or latest is None:
        raise NoDatapointsError()
    # The configured aggregate is not applied here: all windows are averaged.
    return total / count, latest


class QueryExecutor:
    """Resolves external metric names to one value via CAQL."""

    def __init__(
        self,
        store: ConfigStore,
        clients: ClientCache,
        api_url: str | None = None,
        clock: Clock = utc_now,
        default_timeout: float | None = None,
    ):
        self.store = store
        self.clients = clients
        self.api_url = api_url or settings.circonus_api_url
        self.clock = clock
        self.default_timeout = (
            default_timeout
            if default_timeout is not None
            else settings.circonus_request_timeout_seconds
        )

    def resolve(
        self, namespace: str, external_name: str, timeout: float | None = None
    ) -> list[ResolvedMetric]:
        """Current value of ``namespace/external_name``.

        An unknown name yields an empty list. Backend, client and data-shape
        failures raise AdapterError subclasses; nothing is retried here.
        """
        query = self.store.lookup(namespace, external_name)
        if query is None:
            RESOLVE_REQUESTS_TOTAL.labels(outcome="not_found").inc()
            logger.debug(
                "external_metric_not_configured",
                extra={"namespace": namespace, "metric": external_name},
            )
            return []

        end_time = self.clock()
        start_time = end_time - query.window
        end_epoch = int(end_time.timestamp())

        try:
            client = self.clients.get_or_create(query.circonus_api_key, self.api_url)
            with BACKEND_QUERY_LATENCY_SECONDS.time():
                body = client.caql(
                    query.caql,
                    start=int(start_time.timestamp()),
                    end=end_epoch,
                    period=query.period_seconds,
                    timeout=timeout if timeout is not None else self.default_timeout,
                )
            points = decode_caql_response(body)
            value, latest = aggregate_points(points, end_time.timestamp())
        except AdapterError as e:
            RESOLVE_REQUESTS_TOTAL.labels(outcome=type(e).__name__).inc()
            logger.error(
                "external_metric_resolution_failed",
                extra={
                    "namespace": namespace,
                    "metric": external_name,
                    "error_type": type(e).__name__,
                    "error": e.message,
                },
            )
            raise

        RESOLVE_REQUESTS_TOTAL.labels(outcome="ok").inc()
        metric = ResolvedMetric.from_float(
            external_name,
            datetime.fromtimestamp(latest, tz=timezone.utc),
            value,
        )
        logger.debug(
            "external_metric_resolved",
            extra={
                "namespace": namespace,
                "metric": external_name,
                "milli_value": metric.milli_value,
                "points": len(points),
            },
        )
        return [metric]

    def list_known_metrics(self) -> list[ExternalMetricInfo]:
        out = []
        for name in self.store.list_names():
            namespace, _, metric = name.partition("/")
            out.append(ExternalMetricInfo(namespace=namespace, metric=metric))
        return out
