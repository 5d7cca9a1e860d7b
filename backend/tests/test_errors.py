"""
Pixeloria Backend — Error Envelope Tests
==========================================

What:  Every failure leaves the API as {"success": false, "message": ...}
       with a decided status code and no internals.
"""

import pytest
import pytest_asyncio
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError
from app.main import ROUTE_NOT_FOUND_MESSAGE, create_app
from app.middleware.request_id import REQUEST_ID_HEADER
from app.middleware.security_headers import SECURITY_HEADERS
from app.responses import INTERNAL_ERROR_MESSAGE
from conftest import ALLOWED_ORIGIN


def failing_router() -> APIRouter:
    router = APIRouter(prefix="/boom")

    @router.get("/runtime")
    async def runtime_failure():
        raise RuntimeError("secret connection string postgres://user:pw@db")

    @router.get("/database")
    async def database_failure():
        raise DatabaseError(context={"table": "users"})

    @router.get("/conflict")
    async def conflict():
        raise ConflictError("Already there")

    return router


@pytest_asyncio.fixture
async def failing_client(test_settings, database):
    app = create_app(app_settings=test_settings, database=database, registry=[failing_router()])
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": ROUTE_NOT_FOUND_MESSAGE}

    @pytest.mark.asyncio
    async def test_wrong_method(self, client):
        response = await client.patch("/api/blogs")
        assert response.status_code == 405
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        response = await client.post(
            "/api/contact", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_validation_lists_every_error(self, client):
        response = await client.post("/api/contact", json={"first_name": "A"})
        assert response.status_code == 400
        body = response.json()
        fields = {e["field"] for e in body["errors"]}
        assert {"first_name", "last_name", "email", "message"} <= fields
        assert body["message"].startswith("Validation error: ")


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_runtime_error_is_generic_500(self, failing_client):
        response = await failing_client.get("/boom/runtime")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": INTERNAL_ERROR_MESSAGE}
        assert "postgres" not in response.text

    @pytest.mark.asyncio
    async def test_crash_still_passes_through_middleware(self, failing_client):
        response = await failing_client.get("/boom/runtime", headers={"Origin": ALLOWED_ORIGIN})

        assert response.status_code == 500
        assert response.headers["X-Frame-Options"] == SECURITY_HEADERS["X-Frame-Options"]
        assert response.headers["Access-Control-Allow-Origin"] == ALLOWED_ORIGIN
        assert response.headers[REQUEST_ID_HEADER]

    @pytest.mark.asyncio
    async def test_database_error_hides_context(self, failing_client):
        response = await failing_client.get("/boom/database")
        assert response.status_code == 500
        assert response.json()["success"] is False
        assert "users" not in response.text

    @pytest.mark.asyncio
    async def test_application_error_keeps_status(self, failing_client):
        response = await failing_client.get("/boom/conflict")
        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Already there"}


class TestDatabaseUnavailable:

    @pytest.mark.asyncio
    async def test_routes_answer_503_without_database(self, test_settings):
        settings_without_db = test_settings.model_copy(update={"database_url": None})
        app = create_app(app_settings=settings_without_db)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/api/blogs")
        assert response.status_code == 503
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_sqlalchemy_failure_becomes_database_error(self, client, monkeypatch):
        async def broken_scalar(self, *args, **kwargs):
            raise OperationalError("SELECT count(*) FROM blog_posts", {}, Exception("disk I/O error"))

        monkeypatch.setattr(AsyncSession, "scalar", broken_scalar)
        response = await client.get("/api/blogs")

        assert response.status_code == 500
        assert response.json()["message"] == "A database error occurred. Please try again later."
        assert "disk" not in response.text
