"""
Counters for the admin dashboard overview.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.content import BlogPost, Lab, PortfolioProject, Service, Testimonial
from app.models.enums import ContactStatus, SubmissionStatus, SubscriberStatus
from app.models.inquiry import ContactInquiry, EstimateSubmission, NewsletterSubscriber
from app.models.user import User
from app.schemas.admin import DashboardStats
from app.schemas.inquiry import ContactRead

RECENT_CONTACTS = 5

# Collection name → model, in the order the dashboard cards appear.
COUNTED_MODELS = {
    "portfolio": PortfolioProject,
    "blogs": BlogPost,
    "services": Service,
    "labs": Lab,
    "testimonials": Testimonial,
    "contacts": ContactInquiry,
    "subscribers": NewsletterSubscriber,
    "estimates": EstimateSubmission,
    "users": User,
}


async def _count(db: AsyncSession, model, *conditions) -> int:
    total = await db.scalar(select(func.count()).select_from(model).where(*conditions))
    return total or 0


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    totals = {name: await _count(db, model) for name, model in COUNTED_MODELS.items()}

    recent = await db.execute(
        select(ContactInquiry).order_by(ContactInquiry.created_at.desc()).limit(RECENT_CONTACTS)
    )

    return DashboardStats(
        totals=totals,
        new_contacts=await _count(db, ContactInquiry, ContactInquiry.status == ContactStatus.NEW.value),
        new_estimates=await _count(
            db, EstimateSubmission, EstimateSubmission.status == SubmissionStatus.NEW.value
        ),
        active_subscribers=await _count(
            db, NewsletterSubscriber, NewsletterSubscriber.status == SubscriberStatus.ACTIVE.value
        ),
        recent_contacts=[ContactRead.model_validate(c) for c in recent.scalars().all()],
    )
