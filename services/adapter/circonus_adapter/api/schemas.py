"""Kubernetes metrics API wire types (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.constants import APIGroups


class _K8sModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExternalMetricValue(_K8sModel):
    metric_name: str
    metric_labels: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime
    value: str


class ExternalMetricValueList(_K8sModel):
    kind: str = "ExternalMetricValueList"
    api_version: str = APIGroups.group_version(APIGroups.EXTERNAL_METRICS)
    metadata: dict = Field(default_factory=dict)
    items: list[ExternalMetricValue] = Field(default_factory=list)


class APIResource(_K8sModel):
    name: str
    singular_name: str = ""
    namespaced: bool = True
    kind: str
    verbs: list[str] = Field(default_factory=lambda: ["get"])


class APIResourceList(_K8sModel):
    kind: str = "APIResourceList"
    api_version: str = "v1"
    group_version: str
    resources: list[APIResource] = Field(default_factory=list)


class Status(_K8sModel):
    kind: str = "Status"
    api_version: str = "v1"
    metadata: dict = Field(default_factory=dict)
    status: str = "Failure"
    message: str
    reason: str
    code: int
