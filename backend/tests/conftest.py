"""
Pixeloria Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real SQLite database, API
       client, users of every role, temp upload directory).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    test_settings ─┬─ database ─┬─ app ── client
                   │            ├─ admin_user / editor_user / viewer_user / client_user
                   │            └─ admin_headers / editor_headers / ...
                   └─ upload_dir

    Each test gets its own SQLite file under tmp_path, created and seeded
    by the same `initialize_database()` the server runs at boot, so tests
    exercise the real tables and the default admin account.
"""

import os
import tempfile
from typing import Dict, Optional

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="pixeloria_test_"), "import.db"
)
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pixeloria_uploads_")
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from app.config import Settings
from app.database import Database
from app.main import create_app
from app.migrate import initialize_database
from app.models.enums import UserRole
from app.models.user import User
from app.security import create_access_token, get_password_hash

ADMIN_EMAIL = "admin@pixeloria.com"
ADMIN_PASSWORD = "admin-test-pass"
ALLOWED_ORIGIN = "http://localhost:5173"
USER_PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


async def create_user(database: Database, role: UserRole, email: Optional[str] = None, password: str = USER_PASSWORD) -> User:
    """Insert an account directly, bypassing the registration rules."""
    async with database.session() as session:
        async with session.begin():
            user = User(
                name=f"{role.value.title()} User",
                email=email or f"{role.value}@pixeloria.com",
                password_hash=get_password_hash(password),
                role=role.value,
            )
            session.add(user)
    return user


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """
    Settings for one test: private SQLite file and upload directory.

    The rate limit is high enough that no ordinary test trips it; the
    middleware tests build their own app with a low limit.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'pixeloria.db'}",
        environment="test",
        upload_dir=str(tmp_path / "uploads"),
        frontend_url=ALLOWED_ORIGIN,
        cors_extra_origins="",
        rate_limit_max_requests=10_000,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """Connected and initialized database (tables + default admin)."""
    db = Database(test_settings.database_url)
    await db.connect()
    await initialize_database(db, test_settings)
    yield db
    await db.dispose()


@pytest.fixture
def app(test_settings, database):
    return create_app(app_settings=test_settings, database=database)


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    raise_app_exceptions=False lets tests assert on the 500 envelope
    instead of the exception propagating into the test.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ══════════════════════════════════════════════════════════════════════════
# Users & Tokens
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def admin_user(database) -> User:
    async with database.session() as session:
        result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
        return result.scalar_one()


@pytest_asyncio.fixture
async def editor_user(database) -> User:
    return await create_user(database, UserRole.EDITOR)


@pytest_asyncio.fixture
async def viewer_user(database) -> User:
    return await create_user(database, UserRole.VIEWER)


@pytest_asyncio.fixture
async def client_user(database) -> User:
    return await create_user(database, UserRole.CLIENT)


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def editor_headers(editor_user) -> Dict[str, str]:
    return auth_headers(editor_user)


@pytest.fixture
def viewer_headers(viewer_user) -> Dict[str, str]:
    return auth_headers(viewer_user)


@pytest.fixture
def client_headers(client_user) -> Dict[str, str]:
    return auth_headers(client_user)


# ══════════════════════════════════════════════════════════════════════════
# File Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def upload_dir(tmp_path):
    """A fresh upload root for FileService tests."""
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: Start of Image (FFD8) + JFIF marker + End of Image (FFD9).

    Not a decodable photograph, but it carries the JPEG signature.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_png_bytes():
    """A complete 1x1 transparent PNG."""
    return bytes.fromhex(
        "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
        "1f15c4890000000d49444154789c63000100000500010d0a2db400000000"
        "49454e44ae426082"
    )


@pytest.fixture
def user_factory(database):
    """`await user_factory(UserRole.CLIENT, email=...)` → (user, auth headers)."""
    async def _make(role: UserRole, email: Optional[str] = None, password: str = USER_PASSWORD):
        user = await create_user(database, role, email=email, password=password)
        return user, auth_headers(user)
    return _make
