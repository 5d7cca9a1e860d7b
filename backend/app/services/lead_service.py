"""
Pixeloria Backend — Lead Capture Service
==========================================

What:  Contact-form inquiries and newsletter subscriptions from the public
       site.
Why:   Both are unauthenticated writes; the admin dashboard reads and
       triages them through the same service.

Newsletter semantics:
    - new address              → subscriber created (active)
    - unsubscribed address     → reactivated, subscribed_at reset
    - already active address   → ConflictError (409)
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError
from app.models.base import utcnow
from app.models.enums import SubscriberStatus
from app.models.inquiry import ContactInquiry, NewsletterSubscriber
from app.schemas.inquiry import ContactCreate
from app.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

contact_service = ResourceService(ContactInquiry, display_name="Contact inquiry")


async def submit_contact(db: AsyncSession, payload: ContactCreate) -> ContactInquiry:
    inquiry = await contact_service.create(db, payload)
    logger.info(
        "Contact inquiry %s from %s (%s)",
        inquiry.id,
        inquiry.email,
        inquiry.project_type or "unspecified project",
    )
    return inquiry


async def subscribe(db: AsyncSession, email: str) -> Tuple[NewsletterSubscriber, bool]:
    """
    Subscribe or reactivate `email`.

    Returns:
        (subscriber, reactivated): reactivated is True when a lapsed
        subscription was turned back on.
    """
    email = email.strip().lower()
    result = await db.execute(select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))
    subscriber = result.scalar_one_or_none()

    if subscriber is not None:
        if subscriber.status == SubscriberStatus.ACTIVE.value:
            raise ConflictError("Email is already subscribed to newsletter")
        subscriber.status = SubscriberStatus.ACTIVE.value
        subscriber.subscribed_at = utcnow()
        await db.flush()
        await db.refresh(subscriber)
        logger.info("Newsletter subscription reactivated: %s", email)
        return subscriber, True

    subscriber = NewsletterSubscriber(email=email)
    db.add(subscriber)
    try:
        await db.flush()
    except IntegrityError as e:
        raise ConflictError("Email is already subscribed to newsletter") from e
    await db.refresh(subscriber)
    logger.info("Newsletter subscription created: %s", email)
    return subscriber, False


async def list_subscribers(
    db: AsyncSession,
    *,
    status: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[NewsletterSubscriber], int]:
    query = select(NewsletterSubscriber)
    count_query = select(func.count()).select_from(NewsletterSubscriber)
    if status is not None:
        query = query.where(NewsletterSubscriber.status == status)
        count_query = count_query.where(NewsletterSubscriber.status == status)

    total = await db.scalar(count_query)
    result = await db.execute(
        query.order_by(NewsletterSubscriber.subscribed_at.desc())
        .limit(max(1, min(limit, 100)))
        .offset(max(0, offset))
    )
    return list(result.scalars().all()), total or 0
