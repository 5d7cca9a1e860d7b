"""
Pixeloria Backend — Shared Response Envelopes
===============================================

What:  The JSON shapes every endpoint answers with.
Why:   The dashboard and public site parse one envelope for every resource:
           success → {"success": true, "message"?: str, "data": ...}
           failure → {"success": false, "message": str}
How:   `ApiResponse[T]` is generic over the payload so each route declares
       its concrete `response_model` and the OpenAPI document stays precise.

List payloads:
    Offset pagination (`limit` / `offset` + `total`). Admin tables page by
    number and show "n of total", and the collections are small enough that
    OFFSET scans are not a concern.
"""

from datetime import datetime, timezone
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, Field

T = TypeVar("T")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without an offset; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class ApiResponse(BaseModel, Generic[T]):
    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None, description="Human-readable outcome")
    data: Optional[T] = None


class ListData(BaseModel, Generic[T]):
    items: List[T] = Field(description="Records on this page")
    total: int = Field(description="Records matching the filters, across all pages")
    limit: int
    offset: int


class MessageResponse(BaseModel):
    """Body of endpoints that only confirm an action (deletes)."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """
    Uniform error body produced by the terminal exception handlers.

    Example:
        {"success": false, "message": "Project not found"}
    """
    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    What:  Liveness report for load balancers and uptime monitors.

    `status` is always "OK" while the process can answer; the database
    field reports the connection separately so a degraded serverless
    instance is visible without being taken out of rotation.
    """
    status: str = Field(description="Always 'OK' while the process is serving")
    timestamp: datetime = Field(description="Server time of the check (UTC)")
    uptime: float = Field(description="Seconds since the process started")
    environment: str = Field(description="Deployment environment name")
    database: str = Field(description="connected or disconnected")
