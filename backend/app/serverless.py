"""
Pixeloria Backend — Serverless Bootstrap
==========================================

What:  Connect-once-per-execution-context database startup for the
       serverless deployment (api/index.py).
Why:   Serverless platforms may not run the ASGI lifespan and reuse a warm
       process for many invocations. The persistent server's startup rules
       (fail fast, exit non-zero) would take the whole function down.
How:   `DatabaseBootstrap.ensure()` makes exactly one attempt to validate,
       connect and initialize, guarded by a lock and memoized. A failure is
       logged, the engine is disposed, and the app keeps serving: routes
       needing the database answer 503 and /health reports "disconnected".

Sequence (first invocation in a fresh context):
    request → ServerlessBootstrapMiddleware → bootstrap.ensure()
            → validate settings → Database.connect() → initialize_database()
            → route handler
    later invocations: ensure() returns immediately
"""

import asyncio
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import Settings
from app.database import Database
from app.exceptions import PixeloriaError
from app.migrate import initialize_database

logger = logging.getLogger(__name__)


class DatabaseBootstrap:
    """One memoized connect+initialize attempt for an execution context."""

    def __init__(self, database: Optional[Database], app_settings: Settings):
        self.database = database
        self.settings = app_settings
        self.attempted = False
        self.error: Optional[PixeloriaError] = None
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self.database is not None and self.database.is_connected

    async def ensure(self) -> bool:
        """
        Run the startup sequence if it has not been attempted yet.

        Returns:
            True when the database is connected and initialized.
        """
        if self.attempted:
            return self.ready

        async with self._lock:
            if self.attempted:
                return self.ready
            try:
                self.settings.validate_required()
                await self.database.connect()
                await initialize_database(self.database, self.settings)
            except PixeloriaError as e:
                self.error = e
                logger.error(
                    "Serverless startup failed, serving without database: %s | Context: %s",
                    e.message,
                    e.context,
                )
                if self.database is not None:
                    await self.database.dispose()
            finally:
                self.attempted = True

        return self.ready


class ServerlessBootstrapMiddleware(BaseHTTPMiddleware):
    """Awaits the bootstrap before the first request reaches a route."""

    def __init__(self, app, bootstrap: DatabaseBootstrap):
        super().__init__(app)
        self.bootstrap = bootstrap

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        await self.bootstrap.ensure()
        return await call_next(request)
