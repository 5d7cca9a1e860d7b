"""
Bodies specific to the admin dashboard (/api/admin).
"""

import uuid
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field

from app.schemas.inquiry import ContactRead


class BulkDeleteType(str, Enum):
    """Collections that support bulk deletion."""
    BLOGS = "blogs"
    PORTFOLIO = "portfolio"
    SERVICES = "services"
    LABS = "labs"
    CONTACTS = "contacts"
    TESTIMONIALS = "testimonials"


class BulkDeleteRequest(BaseModel):
    type: BulkDeleteType
    ids: List[uuid.UUID] = Field(min_length=1, max_length=500)


class BulkDeleteResult(BaseModel):
    type: BulkDeleteType
    deleted: int = Field(description="Rows actually removed; unknown ids are skipped")


class DashboardStats(BaseModel):
    """Counters behind the dashboard overview cards."""
    totals: Dict[str, int] = Field(description="Record count per collection")
    new_contacts: int
    new_estimates: int
    active_subscribers: int
    recent_contacts: List[ContactRead] = Field(default_factory=list)


class UploadResult(BaseModel):
    url: str = Field(description="Public URL under /uploads")
    filename: str
    size: int
    content_type: str
