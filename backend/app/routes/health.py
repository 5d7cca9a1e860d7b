"""
Pixeloria Backend — Health Check Route
========================================

What:  GET /health for load balancers, uptime monitors and the serverless
       platform's probes.
Why:   Answers whenever the process can serve, and reports the database
       connection separately so a degraded instance is visible.

Response:
    {"status": "OK", "timestamp": ..., "uptime": <seconds>,
     "environment": "production", "database": "connected"}

    `uptime` is measured on the monotonic clock from app creation, so it
    never decreases between calls even if the wall clock is adjusted.
    `database` reflects the Database lifecycle object; no query is issued,
    keeping the probe cheap enough to poll every few seconds.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    state = request.app.state
    database = getattr(state, "database", None)
    started_at = getattr(state, "started_at", None)

    uptime = time.monotonic() - started_at if started_at is not None else 0.0

    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uptime=round(uptime, 3),
        environment=state.settings.environment,
        database="connected" if database is not None and database.is_connected else "disconnected",
    )
