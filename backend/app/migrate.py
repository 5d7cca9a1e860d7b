"""
Pixeloria Backend — Database Initialization
=============================================

What:  Provisions the schema and the default administrator at boot.
Why:   Deployments (including cold serverless starts) must come up against an
       empty database without a separate migration step.
How:   1. `Base.metadata.create_all` with check-first semantics: only missing
          tables are created; existing tables and rows are never touched.
       2. Look up the configured admin e-mail; insert the admin only if absent.

Safe to run on every boot. Each stage that fails is logged with the target
host and the stage name, then re-raised as DatabaseConnectionError so the
entrypoint can decide whether to exit or run degraded.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

import app.models  # noqa: F401  (registers every table with Base.metadata)
from app.config import Settings
from app.database import Base, Database
from app.exceptions import DatabaseConnectionError
from app.models.enums import UserRole
from app.models.user import User
from app.security import get_password_hash

logger = logging.getLogger(__name__)

ADMIN_FALLBACK_PASSWORD = "admin123"
ADMIN_DISPLAY_NAME = "Admin User"


async def create_tables(database: Database) -> None:
    """Create any missing table. Never drops or alters existing ones."""
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)


async def ensure_admin_account(session: AsyncSession, email: str, password: str) -> bool:
    """
    Guarantee an account with `email` exists, creating it as an admin.

    Returns:
        True if the account was created, False if it already existed.
    """
    email = email.strip().lower()
    result = await session.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        logger.info("Admin user already exists: %s", email)
        return False

    session.add(
        User(
            name=ADMIN_DISPLAY_NAME,
            email=email,
            password_hash=get_password_hash(password or ADMIN_FALLBACK_PASSWORD),
            role=UserRole.ADMIN.value,
        )
    )
    await session.flush()
    logger.info("Admin user created: %s", email)
    return True


async def initialize_database(database: Database, app_settings: Settings) -> None:
    """
    Run both initialization stages against a connected database.

    Raises:
        DatabaseConnectionError: naming the failing stage and target host.
    """
    logger.info("Starting database initialization on %s...", database.host)

    stage = "create_tables"
    try:
        await create_tables(database)

        stage = "ensure_admin"
        async with database.session() as session:
            async with session.begin():
                await ensure_admin_account(
                    session,
                    email=app_settings.admin_email,
                    password=app_settings.admin_password,
                )
    except DatabaseConnectionError:
        raise
    except Exception as e:
        logger.error(
            "Database initialization failed on %s during '%s': %s",
            database.host,
            stage,
            e,
            exc_info=True,
        )
        raise DatabaseConnectionError(
            message=f"Database initialization failed during {stage}",
            host=database.host,
            stage=stage,
            context={"error": str(e), "error_type": type(e).__name__},
        ) from e

    logger.info("Database initialization completed successfully")
