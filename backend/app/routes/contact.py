"""
Public lead capture: POST /api/contact and POST /api/contact/newsletter.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.inquiry import ContactCreate, ContactRead, NewsletterSubscribe, SubscriberRead
from app.services import lead_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post(
    "",
    response_model=ApiResponse[ContactRead],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Validation error", "model": ErrorResponse}},
    summary="Submit a contact inquiry",
)
async def submit_contact(
    payload: ContactCreate,
    db: AsyncSession = Depends(get_db_session),
):
    inquiry = await lead_service.submit_contact(db, payload)
    return ApiResponse(
        message="Thank you for your message! We'll get back to you soon.",
        data=ContactRead.model_validate(inquiry),
    )


@router.post(
    "/newsletter",
    response_model=ApiResponse[SubscriberRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error", "model": ErrorResponse},
        409: {"description": "Already subscribed", "model": ErrorResponse},
    },
    summary="Subscribe to the newsletter",
)
async def subscribe_newsletter(
    payload: NewsletterSubscribe,
    db: AsyncSession = Depends(get_db_session),
):
    subscriber, reactivated = await lead_service.subscribe(db, payload.email)
    message = (
        "Welcome back! Your newsletter subscription has been reactivated."
        if reactivated
        else "Successfully subscribed to newsletter"
    )
    return ApiResponse(message=message, data=SubscriberRead.model_validate(subscriber))
