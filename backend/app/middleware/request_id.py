"""
Pixeloria Backend — Request ID Middleware
===========================================

What:  Assigns every request a short correlation id and echoes it back in
       the `X-Request-ID` response header.
Why:   Access log lines, error logs and a user's bug report can be tied to
       the same request.
How:   Reuses a client-supplied `X-Request-ID` (the dashboard sends one) or
       generates one; stores it in a ContextVar for loggers and exception
       handlers, and on `request.state` for route handlers.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one thread each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client-supplied ids end up in log lines; keep them short and printable
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID if it is well-formed
        2. Otherwise generate an 8-character id
        3. Publish it via ContextVar and request.state
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        rid = supplied if _VALID_REQUEST_ID.match(supplied) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
