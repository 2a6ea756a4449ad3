"""Typed view of a CAQL fetch response.

The API answers with ``{"_data": [[timestamp, [v1, v2, ...]], ...], ...}``.
Older deployments return flat points, ``[timestamp, v1, v2, ...]``. Both
forms are accepted; for a flat point only ``v1`` is kept.
"""

from __future__ import annotations

import json
from typing import Annotated, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

from circonus_adapter.core.errors import (
    DataShapeError,
    EmptySeriesError,
    MissingDataError,
)
from circonus_adapter.domain.models import TimeSeriesPoint

RawEntry = Union[float, list[Optional[float]], None]


def _check_point(point: list) -> list:
    if len(point) < 2:
        raise ValueError("point needs a timestamp and at least one value")
    if not isinstance(point[0], (int, float)):
        raise ValueError("point timestamp must be a number")
    return point


RawPoint = Annotated[list[RawEntry], AfterValidator(_check_point)]


class CaqlResponse(BaseModel):
    data: Optional[list[Optional[RawPoint]]] = Field(default=None, alias="_data")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def decode_caql_response(body: bytes) -> list[Optional[TimeSeriesPoint]]:
    """Validate a raw response body into points; ``None`` marks a null point.

    Raises MissingDataError when ``_data`` is absent, EmptySeriesError when
    it is an empty list and DataShapeError for anything else malformed.
    """
    try:
        payload = json.loads(body)
    except (TypeError, ValueError) as e:
        raise DataShapeError(f"Circonus response is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise DataShapeError("Circonus response is not a JSON object")
    if payload.get("_data") is None:
        raise MissingDataError()

    try:
        response = CaqlResponse.model_validate(payload)
    except ValidationError as e:
        raise DataShapeError(
            f"Circonus response has malformed _data: {e.error_count()} invalid entries"
        ) from e

    points = response.data or []
    if not points:
        raise EmptySeriesError()

    out: list[Optional[TimeSeriesPoint]] = []
    for raw in points:
        if raw is None:
            out.append(None)
            continue
        ts, values = raw[0], raw[1]
        if values is None:
            values = []
        elif not isinstance(values, list):
            values = [values]
        out.append(TimeSeriesPoint(timestamp=ts, values=values))
    return out
