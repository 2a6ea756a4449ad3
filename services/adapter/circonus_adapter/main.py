import asyncio
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from shared.constants import Environment

from circonus_adapter.api.errors import adapter_error_handler
from circonus_adapter.api.router import api_router
from circonus_adapter.core.config import settings
from circonus_adapter.core.errors import AdapterError
from circonus_adapter.core.logger import get_logger
from circonus_adapter.provider.client_cache import ClientCache
from circonus_adapter.provider.config_store import ConfigStore
from circonus_adapter.provider.executor import QueryExecutor
from circonus_adapter.provider.refresher import ConfigRefresher
from circonus_adapter.startup import (
    build_config_source,
    initialize_application,
    load_initial_configuration,
)

logger = get_logger("adapter.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_application()
    logger.info("adapter_starting")
    source = build_config_source()
    app.state.store = ConfigStore()
    app.state.clients = ClientCache()
    app.state.executor = QueryExecutor(app.state.store, app.state.clients)
    app.state.ready_event = threading.Event()
    await asyncio.to_thread(
        load_initial_configuration, app.state.store, source, app.state.ready_event
    )
    app.state.refresher = ConfigRefresher(
        app.state.store, source, ready_event=app.state.ready_event
    )
    app.state.refresher.start()
    try:
        yield
    finally:
        logger.info("adapter_stopping")
        await asyncio.to_thread(app.state.refresher.stop)
        app.state.clients.close()


_docs = Environment.exposes_docs(settings.app_environment)

app = FastAPI(
    title="Custom Metrics Circonus Adapter",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if _docs else None,
    redoc_url=None,
    openapi_url="/openapi.json" if _docs else None,
)
app.add_exception_handler(AdapterError, adapter_error_handler)  # type: ignore[arg-type]

instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/docs", "/openapi.json", "/metrics", "/healthz", "/readyz"],
)
instrumentator.instrument(app).expose(app)

app.include_router(api_router)
