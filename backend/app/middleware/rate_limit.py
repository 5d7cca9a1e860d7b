"""
Pixeloria Backend — Rate Limiting Middleware
==============================================

What:  Per-IP sliding window rate limiter.
Why:   Keeps a single client from exhausting the API (contact-form spam,
       login brute force, scraping).
How:   Tracks request timestamps per IP in memory.

Algorithm: Sliding Window Log
    1. Each IP gets a deque of request timestamps
    2. On each request, drop timestamps older than the window
    3. If the remaining count >= limit, reject with 429
    4. Otherwise record the current timestamp and let the request through

    With the defaults (100 requests / 15 minutes) the 101st request inside
    any 15-minute span is rejected; once the oldest timestamp ages out the
    client may send again.

    Fixed windows allow a 2× burst across the boundary; the sliding log
    does not.

Deployment note:
    State is per process. Several uvicorn workers each enforce their own
    window, and serverless instances do not share counters.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, FrozenSet, Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.exceptions import RateLimitExceededError
from app.responses import exception_response

logger = logging.getLogger(__name__)

# Health checks and API docs are always reachable
DEFAULT_EXEMPT_PATHS = frozenset({"/health", "/api-docs", "/api-docs/oauth2-redirect", "/openapi.json"})

CLEANUP_INTERVAL = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests:   Requests allowed per client inside one window
        window_seconds: Window length
        clock:          Monotonic time source; injectable for tests
        exempt_paths:   Paths that are never counted

    Response on rate limit:
        HTTP 429 with the standard error envelope and a Retry-After header
        (seconds until the oldest request leaves the window).
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int = 100,
        window_seconds: float = 900,
        clock: Callable[[], float] = time.monotonic,
        exempt_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.exempt_paths: FrozenSet[str] = (
            frozenset(exempt_paths) if exempt_paths is not None else DEFAULT_EXEMPT_PATHS
        )
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.exempt_paths or request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = self.clock()
        window_start = now - self.window_seconds

        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.max_requests:
            retry_after = max(1, int(timestamps[0] + self.window_seconds - now) + 1)
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window_seconds,
            )
            return exception_response(
                RateLimitExceededError(retry_after=retry_after),
                headers={"Retry-After": str(retry_after)},
            )

        timestamps.append(now)

        self._seen += 1
        if self._seen % CLEANUP_INTERVAL == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
