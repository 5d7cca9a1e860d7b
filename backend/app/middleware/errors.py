"""
Innermost safety net for unexpected exceptions.

FastAPI routes a bare `Exception` handler to the server-error layer that
wraps every user middleware, so a crash would leave without security
headers, CORS headers or a request id. Converting it here keeps the 500
envelope inside the chain.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var
from app.responses import INTERNAL_ERROR_MESSAGE, error_response

logger = logging.getLogger(__name__)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                e,
                exc_info=True,
            )
            return error_response(500, INTERNAL_ERROR_MESSAGE)
