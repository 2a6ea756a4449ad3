"""Error taxonomy for metric resolution.

Each error carries the HTTP status code and Kubernetes ``Status`` reason it
is reported with, so the API layer can render it without a lookup table.
A metric that is simply not configured is *not* an error: resolution returns
an empty list for it.
"""

from __future__ import annotations

from http import HTTPStatus


class AdapterError(Exception):
    """Base class for errors surfaced to metric API callers."""

    code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    reason: str = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(AdapterError):
    """A configuration document could not be parsed or validated."""

    def __init__(self, config_object: str, detail: str):
        super().__init__(f"invalid configuration in {config_object}: {detail}")
        self.config_object = config_object
        self.detail = detail


class ClientConstructionError(AdapterError):
    """A backend client could not be built for a credential."""


class BackendError(AdapterError):
    """The backend query failed: transport error, timeout or non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DataShapeError(AdapterError):
    """The backend answered, but not with a usable time series."""


class MissingDataError(DataShapeError):
    def __init__(self):
        super().__init__("Circonus response missing _data field")


class EmptySeriesError(DataShapeError):
    def __init__(self):
        super().__init__("Empty time series returned from Circonus CAQL query")


class NoDatapointsError(DataShapeError):
    def __init__(self):
        super().__init__("No datapoints found in Circonus CAQL time series")


class FutureTimestampError(DataShapeError):
    def __init__(self, timestamp: float, end: float):
        super().__init__(
            f"Timeseries from Circonus has incorrect end time: {timestamp} is after {end}"
        )
        self.timestamp = timestamp
        self.end = end


class OperationNotSupportedError(AdapterError):
    code = HTTPStatus.NOT_IMPLEMENTED
    reason = "BadRequest"

    def __init__(self, operation: str):
        super().__init__(f'Operation: "{operation}" is not implemented')
        self.operation = operation
