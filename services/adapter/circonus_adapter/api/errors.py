from fastapi import Request
from fastapi.responses import JSONResponse

from circonus_adapter.core.errors import AdapterError

from .schemas import Status


def status_response(code: int, reason: str, message: str) -> JSONResponse:
    body = Status(code=code, reason=reason, message=message)
    return JSONResponse(status_code=code, content=body.model_dump(by_alias=True))


async def adapter_error_handler(request: Request, exc: AdapterError) -> JSONResponse:
    return status_response(int(exc.code), exc.reason, exc.message)
