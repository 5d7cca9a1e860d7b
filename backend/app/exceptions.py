"""
Pixeloria Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every error scenario the API knows.
Why:   Handlers and services raise; the terminal handlers registered in
       main.py translate to the uniform `{success: false, message}` envelope.
How:   Each exception carries a client-safe message, an HTTP status code and
       an optional context dict that is logged but never returned.

Exception Hierarchy:
    PixeloriaError (base)                → 500
    ├── ValidationError                  → 400 Bad Request
    ├── AuthenticationError              → 401 Unauthorized
    ├── AuthorizationError               → 403 Forbidden
    ├── NotFoundError                    → 404 Not Found
    ├── ConflictError                    → 409 Conflict
    ├── PayloadTooLargeError             → 413 Payload Too Large
    ├── RateLimitExceededError           → 429 Too Many Requests
    ├── FileStorageError                 → 500 Internal Server Error
    ├── DatabaseError                    → 500 Internal Server Error
    │   └── DatabaseUnavailableError     → 503 Service Unavailable
    ├── DatabaseConnectionError          (boot time, fatal for the server)
    └── ConfigurationError               (boot time, fatal for the server)
"""

from typing import Any, Dict, Optional


class PixeloriaError(Exception):
    """
    Base exception for all Pixeloria application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the terminal handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PixeloriaError):
    """
    Raised when client input fails a business rule.

    Pydantic schema violations are reported by FastAPI's own
    RequestValidationError and mapped to the same 400 envelope.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(PixeloriaError):
    """Missing, malformed, expired or otherwise invalid credentials."""

    status_code = 401

    def __init__(self, message: str = "Access token required", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthorizationError(PixeloriaError):
    """Authenticated, but the role does not permit the operation."""

    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class NotFoundError(PixeloriaError):
    """
    Raised when a requested record does not exist.

    SQLAlchemy returns None for missing rows; services convert that into this
    exception so the handler can answer 404 with `"<Resource> not found"`.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class ConflictError(PixeloriaError):
    """A uniqueness rule would be violated (duplicate e-mail, subscription)."""

    status_code = 409

    def __init__(self, message: str = "Resource already exists", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class PayloadTooLargeError(PixeloriaError):
    status_code = 413

    def __init__(self, limit: int, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["limit"] = limit
        super().__init__(
            message=f"Request body exceeds the maximum size of {limit // (1024 * 1024)}MB",
            context=ctx,
        )
        self.limit = limit


class RateLimitExceededError(PixeloriaError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    The middleware answers directly (it sits outside the exception handlers),
    but uses this type to build the response so the body stays uniform.
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(
            message="Too many requests from this IP, please try again later.",
            context=ctx,
        )
        self.retry_after = retry_after


class FileStorageError(PixeloriaError):
    """Could not write an uploaded file to the storage volume."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PixeloriaError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; statement and
    driver details go to the server log via `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseUnavailableError(DatabaseError):
    """The serverless variant is running degraded: no connection is available."""

    status_code = 503

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Database is not available. Please try again later.",
            context=context,
        )


class DatabaseConnectionError(PixeloriaError):
    """
    Connect or initialize failed at boot.

    Fatal for the persistent server; the serverless adapter logs it and keeps
    serving with /health reporting the database as disconnected.
    """

    def __init__(
        self,
        message: str = "Database connection failed",
        host: Optional[str] = None,
        stage: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if host:
            ctx["host"] = host
        if stage:
            ctx["stage"] = stage
        super().__init__(message=message, context=ctx)
        self.host = host
        self.stage = stage


class ConfigurationError(PixeloriaError):
    """A mandatory setting is missing or unusable."""

    def __init__(self, message: str = "Invalid configuration", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)
