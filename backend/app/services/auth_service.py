"""
Pixeloria Backend — Account Service
=====================================

What:  Registration, login, password reset and admin user management.
Why:   Keeps password hashing, token issuing and the role-granting rules out
       of the route handlers.

Role-granting rule:
    Anyone may register a `client` or `guest` account. Admin-portal roles
    (admin, editor, viewer) may only be granted by an authenticated admin,
    whether at registration or through a later user update.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.models.enums import PORTAL_ROLES, UserRole
from app.models.user import User
from app.schemas.auth import RegisterRequest, UserUpdate
from app.security import (
    create_access_token,
    create_password_reset_token,
    decode_password_reset_token,
    get_password_hash,
    reset_token_matches,
    verify_password,
)
from app.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User already exists with this email"
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset token"


class AuthService:
    """Stateless; sessions are passed per call like every other service."""

    def __init__(self) -> None:
        self.users = ResourceService(User, display_name="User")

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def register(
        self,
        db: AsyncSession,
        payload: RegisterRequest,
        acting_user: Optional[User] = None,
    ) -> Tuple[User, str]:
        """
        Create an account and issue its first token.

        Raises:
            AuthorizationError: portal role requested without an admin session
            ConflictError: e-mail already registered
        """
        if payload.role.value in PORTAL_ROLES and not _is_admin(acting_user):
            raise AuthorizationError(
                "Only existing admin portal users can create new admin portal accounts"
            )

        if await self.find_by_email(db, payload.email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        user = User(
            name=payload.name.strip(),
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            role=payload.role.value,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same address
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
        await db.refresh(user)

        logger.info("User registered: %s (role=%s)", user.email, user.role)
        return user, create_access_token(str(user.id))

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Tuple[User, str]:
        """
        Verify credentials and issue a token.

        Unknown e-mail and wrong password produce the same message so the
        endpoint cannot be used to probe for accounts.
        """
        user = await self.find_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid credentials")

        logger.info("User logged in: %s", user.email)
        return user, create_access_token(str(user.id))

    # ── Password reset ────────────────────────────────────────────────────
    async def request_password_reset(self, db: AsyncSession, email: str) -> str:
        """
        Issue a one-hour reset token for the account.

        Raises:
            NotFoundError: no account with this e-mail
        """
        user = await self.find_by_email(db, email)
        if user is None:
            raise NotFoundError(resource="User")

        logger.info("Password reset requested for %s", user.email)
        return create_password_reset_token(str(user.id), user.password_hash)

    async def reset_password(self, db: AsyncSession, token: str, new_password: str) -> User:
        """
        Replace the password of the token's account.

        Expired, forged, session and already-used tokens all fail the same way.
        """
        claims = decode_password_reset_token(token)
        user = None
        if claims is not None:
            try:
                user = await db.get(User, uuid.UUID(str(claims["sub"])))
            except ValueError:
                user = None

        if user is None or not reset_token_matches(claims, user.password_hash):
            raise ValidationError(message=INVALID_RESET_TOKEN_MESSAGE, field="token")

        user.password_hash = get_password_hash(new_password)
        await db.flush()
        logger.info("Password reset completed for %s", user.email)
        return user

    # ── Admin user management ─────────────────────────────────────────────
    async def list_users(
        self,
        db: AsyncSession,
        *,
        role: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        query = select(User)
        count_query = select(func.count()).select_from(User)
        if role is not None:
            query = query.where(User.role == role)
            count_query = count_query.where(User.role == role)

        total = await db.scalar(count_query)
        result = await db.execute(
            query.order_by(User.created_at.desc()).limit(max(1, min(limit, 100))).offset(max(0, offset))
        )
        return list(result.scalars().all()), total or 0

    async def update_user(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        payload: UserUpdate,
        acting_user: User,
    ) -> User:
        changes = payload.model_dump(mode="json", exclude_unset=True)
        for key in ("name", "email", "role"):
            if key in changes and changes[key] is None:
                raise ValidationError(message=f"{key} cannot be null", field=key)

        if "role" in changes and changes["role"] in PORTAL_ROLES and not _is_admin(acting_user):
            raise AuthorizationError("Full admin access required")

        user = await self.users.get(db, user_id)
        if user.id == acting_user.id and "role" in changes and changes["role"] != user.role:
            raise ValidationError(message="You cannot change your own role", field="role")

        if "email" in changes and changes["email"] != user.email:
            if await self.find_by_email(db, changes["email"]) is not None:
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        for key, value in changes.items():
            setattr(user, key, value)
        await db.flush()
        await db.refresh(user)

        logger.info("User %s updated by %s: %s", user.id, acting_user.email, ", ".join(changes))
        return user

    async def delete_user(self, db: AsyncSession, user_id: uuid.UUID, acting_user: User) -> None:
        if user_id == acting_user.id:
            raise ValidationError(message="You cannot delete your own account", field="id")
        await self.users.delete(db, user_id)


def _is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == UserRole.ADMIN.value


# Singleton instance
auth_service = AuthService()
