"""
Pixeloria Backend — Database Connection Lifecycle
===================================================

What:  Declarative base, the `Database` lifecycle object, and the per-request
       session dependency.
Why:   One long-lived engine/pool is shared by every in-flight request. The
       entrypoint owns the `Database` instance (stored on `app.state`) instead
       of relying on a module-level "connected" flag.
How:   `connect()` builds the async engine lazily and verifies it with
       SELECT 1; repeated calls are no-ops. Sessions are created per request
       and commit on success, roll back on error.

Connection Pooling Strategy:
    pool_size / max_overflow come from settings for server databases.
    SQLite (tests, local demos) uses SQLAlchemy's default pool for the
    dialect, which does not accept pool sizing arguments.
"""

import asyncio
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.exceptions import DatabaseConnectionError, DatabaseUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with `Base.metadata`, which `initialize_database()`
    uses to create missing tables at boot.
    """
    pass


def describe_target(url: str) -> str:
    """Host (or file, for SQLite) of a database URL, safe to log."""
    try:
        parsed = make_url(url)
    except Exception:
        return "<unparseable url>"
    if parsed.host:
        return f"{parsed.host}:{parsed.port}" if parsed.port else parsed.host
    return parsed.database or parsed.drivername


class Database:
    """
    Connection lifecycle for the application's single engine.

    Lifecycle:
        Database(url)  → not connected, no engine
        await connect() → engine + session factory, verified with SELECT 1
        await connect() → no-op (already connected)
        await dispose() → pool closed, back to not connected

    Thread Safety:
        A lock guards `connect()` so concurrent first requests in the
        serverless variant perform exactly one handshake. Nothing else is
        locked; consistency relies on the database's per-statement atomicity.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.url = url
        self.host = describe_target(url)
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._pool_pre_ping = pool_pre_ping
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseUnavailableError(context={"host": self.host})
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        kwargs = {"echo": self._echo, "pool_pre_ping": self._pool_pre_ping}
        if not make_url(self.url).get_backend_name() == "sqlite":
            kwargs.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_recycle=3600,
            )
        return create_async_engine(self.url, **kwargs)

    async def connect(self) -> None:
        """
        Establish the engine and verify it with a round-trip.

        Raises:
            DatabaseConnectionError: with the target host; the partially
            created engine is disposed so a later call starts clean.
        """
        if self._engine is not None:
            return

        async with self._connect_lock:
            if self._engine is not None:
                return

            engine = None
            try:
                engine = self._create_engine()
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            except Exception as e:
                logger.error("Database connection to %s failed: %s", self.host, e)
                if engine is not None:
                    await engine.dispose()
                raise DatabaseConnectionError(
                    message=f"Could not connect to database at {self.host}",
                    host=self.host,
                    stage="connect",
                    context={"error": str(e), "error_type": type(e).__name__},
                ) from e

            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info("Database connected: %s", self.host)

    def session(self) -> AsyncSession:
        """A new session bound to the shared engine."""
        if self._session_factory is None:
            raise DatabaseUnavailableError(context={"host": self.host})
        return self._session_factory()

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database connections closed: %s", self.host)
        self._engine = None
        self._session_factory = None


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Takes the `Database` the entrypoint stored on `app.state`
        2. Yields a fresh session to the handler
        3. On success: commits; on error: rolls back and re-raises
        4. Always: closes the session (returns connection to pool)

    Raises:
        DatabaseUnavailableError: the app is running without a connection
        (serverless variant after a failed boot).
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseUnavailableError(context={"reason": "no database configured"})
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
