"""
Middleware that assigns a request ID to every HTTP request.

The ID is taken from the X-Request-ID header when the client sends one,
stored in a ContextVar for log correlation and echoed on the response.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from fileops.utils.request_context import (
    clear_request_id,
    generate_request_id,
    set_request_id,
)

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID and log request start/completion."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[no-untyped-def]
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        token = set_request_id(request_id)

        # Liveness probes are polled constantly
        should_log = not request.url.path.startswith("/health")
        started = time.monotonic()

        if should_log:
            logger.info(
                "Request started",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                },
            )

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id

            if should_log:
                logger.info(
                    "Request completed",
                    extra={
                        "status_code": response.status_code,
                        "duration_ms": int((time.monotonic() - started) * 1000),
                    },
                )

            return response
        finally:
            clear_request_id(token)
