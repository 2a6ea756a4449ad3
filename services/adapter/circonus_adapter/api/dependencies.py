from fastapi import Request

from circonus_adapter.provider.executor import QueryExecutor


def get_executor(request: Request) -> QueryExecutor:
    return request.app.state.executor  # type: ignore[return-value]
