"""Global exception handlers that return consistent JSON error envelopes.

Register these with the FastAPI application via ``app.add_exception_handler``.
All responses follow the ``ErrorResponse`` schema from ``vocab.schemas.common``.
``/health`` never reaches these handlers; it degrades to an unhealthy report on
its own.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError
from starlette.exceptions import HTTPException

from vocab.schemas.common import ErrorCode, ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_TO_CODE: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _code_for_status(status_code: int) -> str:
    return _STATUS_TO_CODE.get(status_code, f"HTTP_{status_code}")


def _envelope(status_code: int, code: str, message: str, **kwargs) -> JSONResponse:
    body = ErrorResponse(error=ErrorCode(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(), **kwargs)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Convert ``HTTPException`` to the standard error envelope.

    ``exc.detail`` becomes ``error.message`` and the status code is translated
    to a stable ``error.code`` (e.g. 404 → ``NOT_FOUND``).  Headers attached to
    the exception are forwarded.
    """
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    headers = dict(exc.headers) if exc.headers else None
    return _envelope(exc.status_code, _code_for_status(exc.status_code), detail, headers=headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert ``RequestValidationError`` to a 422 with one ``ErrorDetail`` per field."""
    details: list[ErrorDetail] = []
    for error in exc.errors():
        # ``loc`` looks like ("query", "limit"); drop the location segment.
        loc = error["loc"]
        field_parts = [str(part) for part in loc if part not in ("body", "query", "path")]
        field = ".".join(field_parts) if field_parts else str(loc[-1]) if loc else "unknown"
        details.append(ErrorDetail(field=field, message=error["msg"]))

    body = ErrorResponse(
        error=ErrorCode(
            code="UNPROCESSABLE_ENTITY",
            message="Request validation failed",
            details=details,
        )
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(),
    )


async def datastore_error_handler(request: Request, exc: PyMongoError | RedisError) -> JSONResponse:
    """Map MongoDB and Redis client errors to 503 ``SERVICE_UNAVAILABLE``.

    The driver message can contain hostnames and credentials-bearing URIs, so
    it is logged server-side only.
    """
    logger.warning(
        "Datastore error on %s %s: %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc,
    )
    return _envelope(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "SERVICE_UNAVAILABLE",
        "A backing datastore is unavailable",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback, return a generic ``INTERNAL_ERROR`` body."""
    logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal server error occurred",
    )
