"""
Request and response bodies for /api/auth and admin user management.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.enums import UserRole
from app.schemas.common import UtcDatetime


class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: UserRole = Field(
        default=UserRole.CLIENT,
        description="admin/editor/viewer may only be granted by an authenticated admin",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=128)


class PasswordResetIssued(BaseModel):
    """
    Outcome of a reset request.

    E-mail delivery is not wired up, so outside production the link is
    returned in the body for the dashboard to follow; in production it is
    omitted.
    """
    reset_url: Optional[str] = None


class UserRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    created_at: UtcDatetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """Admin edit of an account. Omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class AuthData(BaseModel):
    """Payload of a successful register or login."""
    user: UserRead
    token: str = Field(description="Bearer token for the Authorization header")
