"""Structured JSON access logging.

One record per request with ``service``, ``method``, ``path``, ``status``,
``duration_ms`` and ``request_id``.  Server errors (5xx, including the 503 a
failing ``/health`` returns) are logged at ``WARNING`` so they stand out from
routine traffic; everything else is ``INFO``.
"""

import json
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from vocab.middleware.request_id import REQUEST_ID_CTX

logger = logging.getLogger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, service: str = "") -> None:
        super().__init__(app)
        self.service = service

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            json.dumps(
                {
                    "service": self.service,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": duration_ms,
                    "request_id": REQUEST_ID_CTX.get(),
                }
            ),
        )
        return response
