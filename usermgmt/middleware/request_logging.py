"""Per-request context and access log.

The request id comes from the ``X-Request-ID`` header or is generated, is
bound to every log record emitted while the request is served, and is echoed
back on the response. Bodies are never logged: they carry passwords.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from usermgmt.core.logging import request_context
from usermgmt.middleware.error_handler import handle_error

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("usermgmt.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()

        with request_context(request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                # Answered here, inside CORSMiddleware, so 500s get CORS headers
                response = await handle_error(request, exc)

            logger.info(
                "%s %s %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                    "client_ip": request.client.host if request.client else None,
                },
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
