from fastapi import APIRouter

from circonus_adapter.api.schemas import APIResourceList
from circonus_adapter.core.errors import OperationNotSupportedError
from shared.constants import APIGroups

router = APIRouter(prefix=APIGroups.base_path(APIGroups.CUSTOM_METRICS))


@router.get("", response_model=APIResourceList, response_model_by_alias=True)
async def list_custom_metrics():
    """Object-scoped metrics are not served; the list is always empty."""
    return APIResourceList(
        group_version=APIGroups.group_version(APIGroups.CUSTOM_METRICS)
    )


@router.get("/namespaces/{namespace}/{resource}/{name}/{metric_name}")
async def get_namespaced_metric_by_name(
    namespace: str, resource: str, name: str, metric_name: str
):
    if name == "*":
        raise OperationNotSupportedError("GetMetricBySelector")
    raise OperationNotSupportedError("GetMetricByName")


@router.get("/{resource}/{name}/{metric_name}")
async def get_root_metric_by_name(resource: str, name: str, metric_name: str):
    if name == "*":
        raise OperationNotSupportedError("GetMetricBySelector")
    raise OperationNotSupportedError("GetMetricByName")


@router.get("/{path:path}")
async def get_custom_metric(path: str):
    raise OperationNotSupportedError("GetCustomMetric")
