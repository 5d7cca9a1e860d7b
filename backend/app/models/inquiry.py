"""
Inbound leads from the public site: contact inquiries, newsletter
subscribers and cost-estimate submissions.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.base import RecordMixin, utcnow
from app.models.enums import ContactStatus, SubmissionStatus, SubscriberStatus


class ContactInquiry(RecordMixin, Base):
    __tablename__ = "contact_inquiries"

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    project_type: Mapped[Optional[str]] = mapped_column(String(100))
    budget: Mapped[Optional[str]] = mapped_column(String(100))
    message: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ContactStatus.NEW.value, index=True
    )


class NewsletterSubscriber(RecordMixin, Base):
    __tablename__ = "newsletter_subscribers"

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriberStatus.ACTIVE.value
    )
    # Reset when a lapsed subscriber re-subscribes.
    subscribed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class EstimateSubmission(RecordMixin, Base):
    """A calculator run, kept so the sales team can follow up."""

    __tablename__ = "estimate_submissions"

    project_type: Mapped[str] = mapped_column(String(100), nullable=False)
    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    timeline: Mapped[str] = mapped_column(String(100), nullable=False)
    budget_range: Mapped[str] = mapped_column(String(100), nullable=False)
    additional_requirements: Mapped[Optional[str]] = mapped_column(Text)
    contact_name: Mapped[Optional[str]] = mapped_column(String(255))
    contact_email: Mapped[Optional[str]] = mapped_column(String(320))
    contact_company: Mapped[Optional[str]] = mapped_column(String(255))
    total_cost: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubmissionStatus.NEW.value, index=True
    )
