"""Request ID middleware for the vocabulary services.

Every response carries an ``X-Request-Id`` header.  An inbound ``X-Request-Id``
that parses as a UUID is propagated unchanged so a call chain across the
dictionary and learning services shares one ID; otherwise a fresh UUID4 is
minted.  The active ID is also published through :data:`REQUEST_ID_CTX` for
log records emitted while the request is in flight.

Add this middleware *last* via ``app.add_middleware`` so it runs outermost.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"

# "" outside of a request so readers never see ``None``.
REQUEST_ID_CTX: ContextVar[str] = ContextVar("request_id", default="")


def _inbound_request_id(request: Request) -> str | None:
    raw = request.headers.get(REQUEST_ID_HEADER)
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Propagate or mint the ``X-Request-Id`` for every HTTP exchange."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _inbound_request_id(request) or str(uuid.uuid4())
        token = REQUEST_ID_CTX.set(request_id)
        try:
            response: Response = await call_next(request)
        finally:
            REQUEST_ID_CTX.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
