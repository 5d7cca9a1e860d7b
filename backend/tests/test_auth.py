"""
Pixeloria Backend — Authentication Tests
==========================================

What we test:
    ✅ Register → token works on /me
    ✅ Duplicate e-mail → 409 (case-insensitive)
    ✅ Portal roles require an admin's token at registration
    ✅ Login with the seeded admin; wrong password and unknown e-mail → 401
    ✅ Missing / malformed / expired / orphaned tokens → 401
    ✅ Password hashing and token helpers
    ✅ Forgot / reset password: single-use, expiring, not a session token
"""

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from app.security import (
    create_access_token,
    create_password_reset_token,
    decode_access_token,
    decode_password_reset_token,
    get_password_hash,
    reset_token_matches,
    verify_password,
)
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, USER_PASSWORD

NEW_USER = {"name": "Casey Client", "email": "Casey@Acme.io", "password": "hunter22"}


class TestSecurityHelpers:

    def test_password_hash_roundtrip(self):
        hashed = get_password_hash("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_against_malformed_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_token_carries_subject(self):
        user_id = str(uuid.uuid4())
        claims = decode_access_token(create_access_token(user_id))
        assert claims["sub"] == user_id
        assert "exp" in claims

    def test_expired_token_rejected(self):
        token = create_access_token("someone", expires_delta=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"sub": "someone"}, "not-our-secret", algorithm="HS256")
        assert decode_access_token(token) is None

    def test_reset_token_is_bound_to_password_hash(self):
        old_hash = get_password_hash("before")
        claims = decode_password_reset_token(create_password_reset_token("someone", old_hash))
        assert claims["sub"] == "someone"
        assert reset_token_matches(claims, old_hash)
        assert not reset_token_matches(claims, get_password_hash("after"))

    def test_session_token_is_not_a_reset_token(self):
        assert decode_password_reset_token(create_access_token("someone")) is None


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_client_and_use_token(self, client):
        response = await client.post("/api/auth/register", json=NEW_USER)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        user = body["data"]["user"]
        assert user["email"] == "casey@acme.io"
        assert user["role"] == "client"
        assert "password" not in user
        assert "password_hash" not in user

        me = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {body['data']['token']}"}
        )
        assert me.status_code == 200
        assert me.json()["data"]["id"] == user["id"]

    @pytest.mark.asyncio
    async def test_duplicate_email_conflict(self, client):
        await client.post("/api/auth/register", json=NEW_USER)
        again = await client.post(
            "/api/auth/register", json={**NEW_USER, "email": "CASEY@acme.io", "name": "Other"}
        )
        assert again.status_code == 409
        assert again.json() == {"success": False, "message": "User already exists with this email"}

    @pytest.mark.asyncio
    async def test_short_password_rejected(self, client):
        response = await client.post("/api/auth/register", json={**NEW_USER, "password": "123"})
        assert response.status_code == 400
        assert response.json()["field"] == "password"

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, client):
        response = await client.post("/api/auth/register", json={**NEW_USER, "email": "nope"})
        assert response.status_code == 400
        assert response.json()["field"] == "email"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["admin", "editor", "viewer"])
    async def test_portal_role_requires_admin(self, client, role):
        response = await client.post("/api/auth/register", json={**NEW_USER, "role": role})
        assert response.status_code == 403
        assert response.json()["message"] == (
            "Only existing admin portal users can create new admin portal accounts"
        )

    @pytest.mark.asyncio
    async def test_editor_cannot_grant_portal_role(self, client, editor_headers):
        response = await client.post(
            "/api/auth/register", json={**NEW_USER, "role": "viewer"}, headers=editor_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_creates_editor(self, client, admin_headers):
        response = await client.post(
            "/api/auth/register", json={**NEW_USER, "role": "editor"}, headers=admin_headers
        )
        assert response.status_code == 201
        assert response.json()["data"]["user"]["role"] == "editor"

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, client):
        response = await client.post("/api/auth/register", json={**NEW_USER, "role": "superuser"})
        assert response.status_code == 400


class TestLogin:

    @pytest.mark.asyncio
    async def test_seeded_admin_can_log_in(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["role"] == "admin"
        assert decode_access_token(body["data"]["token"])["sub"] == body["data"]["user"]["id"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        response = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_unknown_email_same_message(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "ghost@pixeloria.com", "password": "whatever"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Access token required"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, client):
        token = create_access_token(str(uuid.uuid4()))
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_me_returns_profile(self, client, viewer_user, viewer_headers):
        response = await client.get("/api/auth/me", headers=viewer_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == viewer_user.email
        assert data["role"] == "viewer"


class TestPasswordReset:

    @staticmethod
    def token_from(response) -> str:
        reset_url = response.json()["data"]["reset_url"]
        assert "/reset-password?token=" in reset_url
        return reset_url.split("token=", 1)[1]

    @pytest.mark.asyncio
    async def test_forgot_then_reset(self, client, client_user):
        issued = await client.post("/api/auth/forgot-password", json={"email": client_user.email.upper()})
        assert issued.status_code == 200
        token = self.token_from(issued)

        reset = await client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
        assert reset.status_code == 200
        assert reset.json() == {"success": True, "message": "Password reset successful"}

        old_login = await client.post(
            "/api/auth/login", json={"email": client_user.email, "password": USER_PASSWORD}
        )
        new_login = await client.post(
            "/api/auth/login", json={"email": client_user.email, "password": "brand-new-pass"}
        )
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, client, client_user):
        token = self.token_from(await client.post("/api/auth/forgot-password", json={"email": client_user.email}))
        first = await client.post("/api/auth/reset-password", json={"token": token, "password": "first-new-pass"})
        second = await client.post("/api/auth/reset-password", json={"token": token, "password": "second-new-pass"})

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["message"] == "Invalid or expired reset token"

    @pytest.mark.asyncio
    async def test_unknown_email(self, client):
        response = await client.post("/api/auth/forgot-password", json={"email": "nobody@acme.io"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["garbage", "forged", "session"])
    async def test_invalid_tokens_rejected(self, client, client_user, kind):
        tokens = {
            "garbage": "not-a-token",
            "forged": jwt.encode(
                {"sub": str(client_user.id), "purpose": "password_reset"},
                "not-our-secret",
                algorithm="HS256",
            ),
            "session": create_access_token(str(client_user.id)),
        }
        response = await client.post(
            "/api/auth/reset-password", json={"token": tokens[kind], "password": "whatever-pass"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or expired reset token"

    @pytest.mark.asyncio
    async def test_expired_reset_token(self, client, client_user):
        token = create_access_token(
            str(client_user.id),
            expires_delta=timedelta(seconds=-5),
            extra_claims={"purpose": "password_reset"},
        )
        response = await client.post("/api/auth/reset-password", json={"token": token, "password": "whatever-pass"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_reset_token_cannot_authenticate(self, client, client_user):
        token = self.token_from(await client.post("/api/auth/forgot-password", json={"email": client_user.email}))
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_link_withheld_in_production(self, client, client_user, app):
        app.state.settings = app.state.settings.model_copy(update={"environment": "production"})
        response = await client.post("/api/auth/forgot-password", json={"email": client_user.email})
        assert response.status_code == 200
        assert response.json()["data"]["reset_url"] is None
