"""
Request body size limit (413 above MAX_BODY_SIZE, 10 MiB by default).

The declared Content-Length is checked before anything is read. Chunked
bodies carry no length, so they are read here and measured; the body is
then replayed to the route handler by Starlette's request caching.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.exceptions import PayloadTooLargeError
from app.responses import exception_response

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, max_body_size: int = 10 * 1024 * 1024):
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method not in BODY_METHODS:
            return await call_next(request)

        declared = request.headers.get("content-length")
        if declared is not None:
            if declared.isdigit() and int(declared) > self.max_body_size:
                return self._reject(request, int(declared))
        elif "chunked" in request.headers.get("transfer-encoding", "").lower():
            body = await request.body()
            if len(body) > self.max_body_size:
                return self._reject(request, len(body))

        return await call_next(request)

    def _reject(self, request: Request, size: int) -> Response:
        logger.warning(
            "Rejected %s %s: body of %d bytes exceeds %d",
            request.method,
            request.url.path,
            size,
            self.max_body_size,
        )
        return exception_response(PayloadTooLargeError(limit=self.max_body_size))
