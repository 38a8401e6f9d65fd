"""
API Middleware

Access logging. Each request gets an id (taken from the X-Request-ID header
when the caller sends one) that is bound into the structlog context, so every
log line an analysis emits while serving the request carries it.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
TIMING_HEADER = "X-Response-Time"

# Probes hit these every few seconds; logged at debug only
PROBE_PATHS = ("/health", "/health/live", "/health/ready")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access-log event per request, with status and duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

            log = logger.debug if request.url.path.endswith(PROBE_PATHS) else logger.info
            log(
                "Request handled",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query) or None,
                status_code=response.status_code,
                duration_ms=elapsed_ms,
                client=request.client.host if request.client else None,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[TIMING_HEADER] = f"{elapsed_ms}ms"
        return response
