"""
Bodies for the public lead-capture endpoints (contact form, newsletter) and
their admin views.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.enums import ContactStatus, SubscriberStatus
from app.schemas.common import UtcDatetime


class ContactCreate(BaseModel):
    first_name: str = Field(min_length=2, max_length=255)
    last_name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    company: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    project_type: Optional[str] = Field(default=None, max_length=100)
    budget: Optional[str] = Field(default=None, max_length=100)
    message: str = Field(min_length=1)
    file_url: Optional[str] = Field(
        default=None,
        max_length=500,
        description="URL returned by an earlier upload, if the visitor attached a file",
    )


class ContactRead(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company: Optional[str] = None
    phone: Optional[str] = None
    project_type: Optional[str] = None
    budget: Optional[str] = None
    message: str
    file_url: Optional[str] = None
    status: ContactStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class NewsletterSubscribe(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class SubscriberRead(BaseModel):
    id: uuid.UUID
    email: str
    status: SubscriberStatus
    subscribed_at: UtcDatetime

    model_config = {"from_attributes": True}
