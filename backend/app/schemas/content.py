"""
Pixeloria Backend — Site Content Schemas
==========================================

What:  Create / Update / Read models for portfolio projects, blog posts,
       services, labs and testimonials.
Why:   The generic CRUD router is parameterised by these three models per
       resource; everything resource-specific lives here.

Conventions:
    - `*Create`: required fields have no default; status defaults to the
      value a newly published record should have.
    - `*Update`: every field optional; only fields present in the request
      body are applied (`exclude_unset`). Sending null for a required field
      is rejected by the service.
    - `*Read`: `from_attributes` so ORM rows serialize directly.
    - Statuses are the closed enums from `app.models.enums`; anything else
      fails validation with 400.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.enums import PublicationStatus, ServiceStatus
from app.schemas.common import UtcDatetime


class _RecordRead(BaseModel):
    id: uuid.UUID
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Portfolio
# ══════════════════════════════════════════════════════════════════════════


class PortfolioCreate(BaseModel):
    title: str = Field(min_length=2, max_length=255)
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list, description="Image URLs, first is the cover")
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    tech_stack: List[str] = Field(default_factory=list)
    results: List[str] = Field(default_factory=list, description="Outcome bullet points")
    link: Optional[str] = Field(default=None, max_length=500)
    status: PublicationStatus = PublicationStatus.PUBLISHED


class PortfolioUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    images: Optional[List[str]] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    tech_stack: Optional[List[str]] = None
    results: Optional[List[str]] = None
    link: Optional[str] = Field(default=None, max_length=500)
    status: Optional[PublicationStatus] = None


class PortfolioRead(_RecordRead):
    title: str
    description: Optional[str] = None
    images: List[str]
    category: Optional[str] = None
    tags: List[str]
    tech_stack: List[str]
    results: List[str]
    link: Optional[str] = None
    status: PublicationStatus


# ══════════════════════════════════════════════════════════════════════════
# Blog
# ══════════════════════════════════════════════════════════════════════════


class BlogCreate(BaseModel):
    title: str = Field(min_length=2, max_length=255)
    excerpt: Optional[str] = None
    content: str = Field(min_length=1)
    image_url: Optional[str] = Field(default=None, max_length=500)
    author: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    read_time: Optional[int] = Field(default=None, ge=1, description="Minutes")
    status: PublicationStatus = PublicationStatus.PUBLISHED


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=255)
    excerpt: Optional[str] = None
    content: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = Field(default=None, max_length=500)
    author: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    read_time: Optional[int] = Field(default=None, ge=1)
    status: Optional[PublicationStatus] = None


class BlogRead(_RecordRead):
    title: str
    excerpt: Optional[str] = None
    content: str
    image_url: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    tags: List[str]
    read_time: Optional[int] = None
    status: PublicationStatus


# ══════════════════════════════════════════════════════════════════════════
# Services
# ══════════════════════════════════════════════════════════════════════════


class ServiceCreate(BaseModel):
    title: str = Field(min_length=2, max_length=255)
    description: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    price_range: Optional[str] = Field(default=None, max_length=100)
    duration: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)
    status: ServiceStatus = ServiceStatus.ACTIVE


class ServiceUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    features: Optional[List[str]] = None
    price_range: Optional[str] = Field(default=None, max_length=100)
    duration: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)
    status: Optional[ServiceStatus] = None


class ServiceRead(_RecordRead):
    title: str
    description: Optional[str] = None
    features: List[str]
    price_range: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    status: ServiceStatus


# ══════════════════════════════════════════════════════════════════════════
# Labs
# ══════════════════════════════════════════════════════════════════════════


class LabCreate(BaseModel):
    title: str = Field(min_length=2, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    demo_url: Optional[str] = Field(default=None, max_length=500)
    source_url: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    status: PublicationStatus = PublicationStatus.PUBLISHED


class LabUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    demo_url: Optional[str] = Field(default=None, max_length=500)
    source_url: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    status: Optional[PublicationStatus] = None


class LabRead(_RecordRead):
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str]
    demo_url: Optional[str] = None
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    status: PublicationStatus


# ══════════════════════════════════════════════════════════════════════════
# Testimonials (admin-managed)
# ══════════════════════════════════════════════════════════════════════════


class TestimonialCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    role: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    industry: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    quote: str = Field(min_length=1)
    full_quote: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    project_type: Optional[str] = Field(default=None, max_length=100)
    results: List[str] = Field(default_factory=list)
    status: PublicationStatus = PublicationStatus.PUBLISHED


class TestimonialUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    role: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    industry: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    quote: Optional[str] = Field(default=None, min_length=1)
    full_quote: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    project_type: Optional[str] = Field(default=None, max_length=100)
    results: Optional[List[str]] = None
    status: Optional[PublicationStatus] = None


class TestimonialRead(_RecordRead):
    name: str
    role: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    image_url: Optional[str] = None
    quote: str
    full_quote: Optional[str] = None
    rating: Optional[int] = None
    project_type: Optional[str] = None
    results: List[str]
    status: PublicationStatus
