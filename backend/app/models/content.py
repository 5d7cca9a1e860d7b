"""
Pixeloria Backend — Site Content Models
=========================================

What:  ORM models for the content the admin dashboard manages and the public
       site renders: portfolio projects, blog posts, services, labs and
       testimonials.
Why:   Each is a flat record with a lifecycle status; none owns another.

List columns (tags, tech_stack, features, ...) use the generic JSON type:
JSONB-compatible on PostgreSQL, TEXT-backed on SQLite. They are always
replaced wholesale on update, never mutated in place, so no mutation
tracking is needed.
"""

from typing import List, Optional

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.base import RecordMixin
from app.models.enums import PublicationStatus, ServiceStatus


class PortfolioProject(RecordMixin, Base):
    __tablename__ = "portfolio_projects"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    tech_stack: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    results: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    link: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PublicationStatus.PUBLISHED.value, index=True
    )


class BlogPost(RecordMixin, Base):
    __tablename__ = "blog_posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    author: Mapped[Optional[str]] = mapped_column(String(255))
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    read_time: Mapped[Optional[int]] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PublicationStatus.PUBLISHED.value, index=True
    )


class Service(RecordMixin, Base):
    __tablename__ = "services"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    price_range: Mapped[Optional[str]] = mapped_column(String(100))
    duration: Mapped[Optional[str]] = mapped_column(String(100))
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ServiceStatus.ACTIVE.value, index=True
    )


class Lab(RecordMixin, Base):
    __tablename__ = "labs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    demo_url: Mapped[Optional[str]] = mapped_column(String(500))
    source_url: Mapped[Optional[str]] = mapped_column(String(500))
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PublicationStatus.PUBLISHED.value, index=True
    )


class Testimonial(RecordMixin, Base):
    __tablename__ = "testimonials"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String(255))
    company: Mapped[Optional[str]] = mapped_column(String(255))
    industry: Mapped[Optional[str]] = mapped_column(String(100))
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    quote: Mapped[str] = mapped_column(Text, nullable=False)
    full_quote: Mapped[Optional[str]] = mapped_column(Text)
    rating: Mapped[Optional[int]] = mapped_column(Integer)
    project_type: Mapped[Optional[str]] = mapped_column(String(100))
    results: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PublicationStatus.PUBLISHED.value, index=True
    )
