"""
Builders for the uniform JSON envelope.

Used by the terminal exception handlers and by middleware that answers
before routing (CORS rejection, rate limiting, body size), so every error
body has the same `{success, message}` shape no matter where it came from.
"""

from typing import Any, Dict, Mapping, Optional

from starlette.responses import JSONResponse

from app.exceptions import PixeloriaError

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again or contact support."


def error_response(
    status_code: int,
    message: str,
    headers: Optional[Mapping[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=dict(headers or {}))


def exception_response(exc: PixeloriaError, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    """Envelope for an application exception, using its own status code."""
    return error_response(exc.status_code, exc.message, headers=headers)
