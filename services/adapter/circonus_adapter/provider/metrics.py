"""Prometheus metrics for configuration refresh and metric resolution."""

from shared.metrics import get_counter, get_gauge, get_histogram

from circonus_adapter.core.config import settings

_SERVICE = settings.otel_service_name

# Configuration refresh
CONFIG_REFRESH_TOTAL = get_counter(
    "config_refresh_total",
    "Configuration refresh cycles by outcome.",
    _SERVICE,
    labelnames=("outcome",),
)
CONFIG_OBJECTS_APPLIED_TOTAL = get_counter(
    "config_objects_applied_total",
    "Configuration objects parsed and merged into the store.",
    _SERVICE,
)
CONFIG_PARSE_ERRORS_TOTAL = get_counter(
    "config_parse_errors_total",
    "Configuration objects rejected because they failed to parse.",
    _SERVICE,
)
CONFIGURED_METRICS = get_gauge(
    "configured_metrics",
    "External metrics currently known to the configuration store.",
    _SERVICE,
)

# Resolution
RESOLVE_REQUESTS_TOTAL = get_counter(
    "resolve_requests_total",
    "External metric resolutions by outcome.",
    _SERVICE,
    labelnames=("outcome",),
)
BACKEND_QUERY_LATENCY_SECONDS = get_histogram(
    "backend_query_latency_seconds",
    "Latency of CAQL queries against the Circonus API.",
    _SERVICE,
)
CLIENTS_CACHED = get_gauge(
    "clients_cached",
    "Circonus API clients held by the client cache.",
    _SERVICE,
)
