import threading

from shared.utils.retry import retry

from circonus_adapter.core.config import settings
from circonus_adapter.core.logger import configure_logging, get_logger
from circonus_adapter.infrastructure.configsource.sources import DirectoryConfigSource
from circonus_adapter.provider.config_store import ConfigSource, ConfigStore

logger = get_logger("startup")


def initialize_application():
    configure_logging()
    logger.info(
        "application_initializing",
        extra={
            "service": settings.otel_service_name,
            "circonus_api_url": settings.circonus_api_url,
            "config_directory": settings.config_directory,
            "refresh_interval": settings.config_refresh_interval_seconds,
        },
    )


def build_config_source() -> ConfigSource:
    return DirectoryConfigSource(settings.config_directory)


def load_initial_configuration(
    store: ConfigStore,
    source: ConfigSource,
    ready_event: threading.Event,
) -> bool:
    """Populate the store before traffic arrives.

    A source that stays unavailable is not fatal: the service starts
    unready and the background refresher keeps trying.
    """

    def _on_retry(attempt: int, exc: BaseException, sleep_for: float):
        logger.warning(
            "config_initial_load_retry",
            extra={
                "attempt": attempt,
                "error": str(exc),
                "sleep_for": round(sleep_for, 2),
            },
        )

    try:
        applied = retry(
            lambda: store.refresh(source),
            retries=settings.config_initial_load_retries,
            base_delay=settings.config_initial_load_base_delay_seconds,
            max_delay=8.0,
            jitter=0.2,
            on_retry=_on_retry,
        )
    except Exception as e:  # noqa: BLE001 - startup continues unready
        logger.error(
            "config_initial_load_failed",
            extra={"error_type": type(e).__name__, "error": str(e)},
        )
        return False

    ready_event.set()
    logger.info(
        "config_initial_load_completed",
        extra={
            "objects_applied": applied,
            "metrics": len(store.snapshot().definitions),
        },
    )
    return True
