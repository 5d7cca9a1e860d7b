"""
Pixeloria Backend — Authentication Dependencies
=================================================

What:  FastAPI dependencies resolving the bearer token to a `User` and
       enforcing role tiers on routes.
How:   `HTTPBearer(auto_error=False)` so a missing header reaches our own
       handler and produces the standard envelope instead of FastAPI's
       default 403 body.

Role tiers:
    require_portal      admin, editor, viewer  (read admin data)
    require_editor      admin, editor          (content writes)
    require_full_admin  admin                  (users, bulk delete)
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import AuthenticationError, AuthorizationError
from app.models.enums import EDITOR_ROLES, PORTAL_ROLES, UserRole
from app.models.user import User
from app.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def _resolve_user(db: AsyncSession, token: str) -> User:
    claims = decode_access_token(token)
    if claims is None or "sub" not in claims or "purpose" in claims:
        raise AuthenticationError("Invalid or expired token")

    try:
        user_id = uuid.UUID(str(claims["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid or expired token") from None

    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Invalid token")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return await _resolve_user(db, credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """The caller if a valid token was sent; None otherwise. Never raises."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await _resolve_user(db, credentials.credentials)
    except AuthenticationError:
        logger.debug("Ignoring invalid optional bearer token")
        return None


async def require_portal(user: User = Depends(get_current_user)) -> User:
    if user.role not in PORTAL_ROLES:
        raise AuthorizationError("Admin portal access required")
    return user


async def require_editor(user: User = Depends(get_current_user)) -> User:
    if user.role not in EDITOR_ROLES:
        raise AuthorizationError("Editor or admin access required")
    return user


async def require_full_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN.value:
        raise AuthorizationError("Full admin access required")
    return user
