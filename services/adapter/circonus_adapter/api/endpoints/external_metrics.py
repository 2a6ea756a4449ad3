import time

from fastapi import APIRouter, Depends, Query

from circonus_adapter.api.dependencies import get_executor
from circonus_adapter.api.schemas import (
    APIResource,
    APIResourceList,
    ExternalMetricValue,
    ExternalMetricValueList,
)
from circonus_adapter.core.logger import get_logger
from circonus_adapter.provider.executor import QueryExecutor
from shared.constants import APIGroups

router = APIRouter(prefix=APIGroups.base_path(APIGroups.EXTERNAL_METRICS))
logger = get_logger("api.external_metrics")


@router.get("", response_model=APIResourceList, response_model_by_alias=True)
def list_external_metrics(executor: QueryExecutor = Depends(get_executor)):
    """Discovery document listing every configured external metric name."""
    names = sorted({info.metric for info in executor.list_known_metrics()})
    return APIResourceList(
        group_version=APIGroups.group_version(APIGroups.EXTERNAL_METRICS),
        resources=[
            APIResource(name=name, kind="ExternalMetricValueList") for name in names
        ],
    )


# Sync handler: each resolution runs on its own worker thread and may block
# on the Circonus API without stalling the event loop.
# The label selector is never logged: selectors may carry credentials.
@router.get(
    "/namespaces/{namespace}/{metric_name}",
    response_model=ExternalMetricValueList,
    response_model_by_alias=True,
)
def get_external_metric(
    namespace: str,
    metric_name: str,
    label_selector: str | None = Query(None, alias="labelSelector"),
    executor: QueryExecutor = Depends(get_executor),
):
    start_time = time.time()
    resolved = executor.resolve(namespace, metric_name)
    logger.info(
        "external_metric_request",
        extra={
            "namespace": namespace,
            "metric": metric_name,
            "has_label_selector": label_selector is not None,
            "items": len(resolved),
            "processing_time": time.time() - start_time,
        },
    )
    return ExternalMetricValueList(
        items=[
            ExternalMetricValue(
                metric_name=m.metric_name,
                timestamp=m.timestamp,
                value=m.quantity,
            )
            for m in resolved
        ]
    )
