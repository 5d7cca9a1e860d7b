"""
Pixeloria Backend — Access Logging Middleware
===============================================

One line per request on the `pixeloria.access` logger:

    POST /api/contact 201 12.4ms [a1b2c3d4] from 203.0.113.7

The same fields ride along as `extra` so a structured handler can index them.

Severity:
    5xx                      → ERROR
    4xx, or slower than
    `slow_request_ms`        → WARNING
    everything else          → INFO

Request bodies and Authorization headers are never logged; contact forms
and login payloads carry personal data.
"""

import logging
import time
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.middleware.request_id import request_id_var

logger = logging.getLogger("pixeloria.access")

DEFAULT_QUIET_PATHS = ("/health",)
DEFAULT_SLOW_REQUEST_MS = 2000.0


def _client_address(request: Request) -> str:
    # Same key as the rate limiter; proxy headers are resolved by uvicorn
    return request.client.host if request.client else "unknown"


def _severity(status: int, duration_ms: float, slow_request_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or duration_ms > slow_request_ms:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for everything except load-balancer probes."""

    def __init__(
        self,
        app: ASGIApp,
        quiet_paths: Iterable[str] = DEFAULT_QUIET_PATHS,
        slow_request_ms: float = DEFAULT_SLOW_REQUEST_MS,
    ) -> None:
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths)
        self.slow_request_ms = slow_request_ms

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": _client_address(request),
            "user_agent": request.headers.get("user-agent", ""),
        }
        logger.log(
            _severity(response.status_code, elapsed_ms, self.slow_request_ms),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] from %(client_ip)s",
            fields,
            extra=fields,
        )
        return response
