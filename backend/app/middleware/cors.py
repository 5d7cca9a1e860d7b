"""
Pixeloria Backend — CORS Allow-List Enforcement
=================================================

What:  Rejects any request whose `Origin` header is not on the allow-list
       with 403 `{"success": false, "message": "Not allowed by CORS"}`.
Why:   Starlette's CORSMiddleware only withholds the CORS response headers
       for simple requests from unknown origins; the handler still runs.
       The admin API must not act on requests from foreign sites at all.
How:   Sits directly outside CORSMiddleware. Requests without an Origin
       (curl, server-to-server, same-origin navigation) pass through, as do
       allowed origins, which CORSMiddleware then decorates with headers.
"""

import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.responses import error_response

logger = logging.getLogger(__name__)

CORS_REJECTION_MESSAGE = "Not allowed by CORS"


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = frozenset(o.rstrip("/") for o in allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        if origin is None or origin.rstrip("/") in self.allowed_origins:
            return await call_next(request)

        logger.warning(
            "Rejected cross-origin %s %s from origin %s",
            request.method,
            request.url.path,
            origin,
        )
        return error_response(403, CORS_REJECTION_MESSAGE)
