"""
Pixeloria Backend — Authentication Routes
===========================================

What:  POST /api/auth/register, POST /api/auth/login, GET /api/auth/me,
       POST /api/auth/forgot-password, POST /api/auth/reset-password.
How:   Thin handlers over AuthService; tokens are returned in the body and
       sent back by clients as `Authorization: Bearer <token>`.

Registration of dashboard roles (admin/editor/viewer) requires an admin's
token on the register request itself; without one only client/guest
accounts can be created.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.auth import (
    AuthData,
    ForgotPasswordRequest,
    LoginRequest,
    PasswordResetIssued,
    RegisterRequest,
    ResetPasswordRequest,
    UserRead,
)
from app.schemas.common import ApiResponse, ErrorResponse, MessageResponse
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error", "model": ErrorResponse},
        403: {"description": "Portal role requested without admin token", "model": ErrorResponse},
        409: {"description": "E-mail already registered", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    acting_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
):
    user, token = await auth_service.register(db, payload, acting_user=acting_user)
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(user=UserRead.model_validate(user), token=token),
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthData],
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and obtain a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
):
    user, token = await auth_service.authenticate(db, payload.email, payload.password)
    return ApiResponse(
        message="Login successful",
        data=AuthData(user=UserRead.model_validate(user), token=token),
    )


@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Current user profile",
)
async def me(user: User = Depends(get_current_user)):
    return ApiResponse(data=UserRead.model_validate(user))


@router.post(
    "/forgot-password",
    response_model=ApiResponse[PasswordResetIssued],
    responses={404: {"description": "No account with this e-mail", "model": ErrorResponse}},
    summary="Request a password reset link",
)
async def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    token = await auth_service.request_password_reset(db, payload.email)
    app_settings = request.app.state.settings
    reset_url = None
    if not app_settings.is_production:
        reset_url = f"{app_settings.frontend_url.rstrip('/')}/reset-password?token={token}"
    return ApiResponse(
        message="Password reset requested",
        data=PasswordResetIssued(reset_url=reset_url),
    )


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired reset token", "model": ErrorResponse}},
    summary="Set a new password with a reset token",
)
async def reset_password(
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db_session),
):
    await auth_service.reset_password(db, payload.token, payload.password)
    return MessageResponse(message="Password reset successful")
