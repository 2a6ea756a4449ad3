from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from circonus_adapter.core.durations import parse_duration


class Aggregate(str, Enum):
    """How datapoints inside a query window are combined."""

    AVERAGE = "average"
    MIN = "min"
    MAX = "max"

    @classmethod
    def coerce(cls, value: Any) -> "Aggregate":
        """Map unknown or empty values to AVERAGE instead of failing."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.AVERAGE


def _to_timedelta(value: Any) -> Any:
    if isinstance(value, str):
        return parse_duration(value)
    return value


class QueryDefinition(BaseModel):
    """One configured external metric."""

    caql: str = Field(..., min_length=1, description="CAQL statement, sent verbatim")
    circonus_api_key: str = Field(..., description="Credential the query runs under")
    external_name: str = Field(..., min_length=1, description="Metric name in HPA specs")
    window: timedelta = Field(
        default=timedelta(minutes=5), description="How far back from now to fetch"
    )
    stride: timedelta = Field(
        default=timedelta(minutes=1), description="Sampling period of returned points"
    )
    aggregate: Aggregate = Field(
        default=Aggregate.AVERAGE, description="Combiner for points in the window"
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("window", "stride", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        return _to_timedelta(value)

    @field_validator("window")
    @classmethod
    def _window_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("window must be positive")
        return value

    @field_validator("stride")
    @classmethod
    def _stride_at_least_one_second(cls, value: timedelta) -> timedelta:
        if value < timedelta(seconds=1):
            raise ValueError("stride must be at least 1s")
        return value

    @field_validator("aggregate", mode="before")
    @classmethod
    def _normalize_aggregate(cls, value: Any) -> Aggregate:
        return Aggregate.coerce(value)

    @property
    def period_seconds(self) -> int:
        return int(self.stride.total_seconds())


class AdapterConfig(BaseModel):
    """A configuration document: the list of queries it declares."""

    queries: list[QueryDefinition] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


@dataclass(frozen=True)
class ConfigObject:
    """One raw configuration document as handed over by a ConfigSource."""

    namespace: str
    name: str
    change_marker: str
    data: bytes
    enabled: bool = True

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"


def metric_key(namespace: str, external_name: str) -> str:
    return f"{namespace}/{external_name}"


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Every QueryDefinition in effect, published as a unit.

    ``definitions`` maps ``namespace/external_name`` to its query,
    ``markers`` maps ``namespace/object_name`` to the last change marker seen
    and ``owners`` maps ``namespace/object_name`` to the definitions that
    object contributed. ``owners`` is ordered from least to most recently
    applied object.
    """

    definitions: Mapping[str, QueryDefinition] = field(
        default_factory=lambda: MappingProxyType({})
    )
    markers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    owners: Mapping[str, Mapping[str, QueryDefinition]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    version: int = 0

    @classmethod
    def build(
        cls,
        definitions: dict[str, QueryDefinition],
        markers: dict[str, str],
        owners: dict[str, Mapping[str, QueryDefinition]],
        version: int,
    ) -> "ConfigurationSnapshot":
        return cls(
            definitions=MappingProxyType(dict(definitions)),
            markers=MappingProxyType(dict(markers)),
            owners=MappingProxyType(
                {key: MappingProxyType(dict(owned)) for key, owned in owners.items()}
            ),
            version=version,
        )


class TimeSeriesPoint(BaseModel):
    """A single CAQL datapoint; only ``values[0]`` is consulted."""

    timestamp: float
    values: list[Optional[float]]

    @property
    def value(self) -> Optional[float]:
        return self.values[0] if self.values else None


class ExternalMetricInfo(BaseModel):
    namespace: str
    metric: str

    model_config = ConfigDict(frozen=True)


class ResolvedMetric(BaseModel):
    """Value of one external metric as of its latest datapoint."""

    metric_name: str
    timestamp: datetime
    milli_value: int

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_float(
        cls, metric_name: str, timestamp: datetime, value: float
    ) -> "ResolvedMetric":
        return cls(
            metric_name=metric_name,
            timestamp=timestamp,
            milli_value=int(value * 1000),
        )

    @property
    def value(self) -> Decimal:
        return Decimal(self.milli_value).scaleb(-3)

    @property
    def quantity(self) -> str:
        return format_milli_quantity(self.milli_value)


def format_milli_quantity(milli_value: int) -> str:
    """Canonical Kubernetes DecimalSI rendering of a milli-unit amount."""
    if milli_value % 1000 == 0:
        return str(milli_value // 1000)
    return f"{milli_value}m"
