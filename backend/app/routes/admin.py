"""
Pixeloria Backend — Admin Dashboard Routes
============================================

What:  Everything under /api/admin: overview counters, inquiry triage, user
       management, testimonials, newsletter, estimate follow-up, bulk
       deletion and image uploads.

Access tiers (see app.dependencies):
    portal     GET endpoints (dashboard, lists, details)
    editor     status changes, deletions of single leads, testimonial
               writes, uploads
    full admin user management, bulk delete
"""

import logging
from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import require_editor, require_full_admin, require_portal
from app.models.enums import ContactStatus, PublicationStatus, SubmissionStatus, SubscriberStatus, UserRole
from app.models.user import User
from app.routes.crud import CrudResource, build_crud_router
from app.schemas.admin import BulkDeleteRequest, BulkDeleteResult, BulkDeleteType, DashboardStats, UploadResult
from app.schemas.auth import UserRead, UserUpdate
from app.schemas.common import ApiResponse, ErrorResponse, ListData, MessageResponse
from app.schemas.content import TestimonialCreate, TestimonialRead, TestimonialUpdate
from app.schemas.estimate import SubmissionRead, SubmissionStatusUpdate
from app.schemas.inquiry import ContactRead, ContactStatusUpdate, SubscriberRead
from app.services import dashboard_service, lead_service
from app.services.auth_service import auth_service
from app.services.content_service import (
    blog_service,
    lab_service,
    offering_service,
    portfolio_service,
    testimonial_service,
)
from app.services.estimate_service import submission_service
from app.services.file_service import FileService
from app.services.lead_service import contact_service
from app.services.resource_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ResourceService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        403: {"description": "Insufficient permissions", "model": ErrorResponse},
    },
)

BULK_DELETE_TARGETS: Dict[BulkDeleteType, ResourceService] = {
    BulkDeleteType.BLOGS: blog_service,
    BulkDeleteType.PORTFOLIO: portfolio_service,
    BulkDeleteType.SERVICES: offering_service,
    BulkDeleteType.LABS: lab_service,
    BulkDeleteType.CONTACTS: contact_service,
    BulkDeleteType.TESTIMONIALS: testimonial_service,
}


# ── Dashboard ─────────────────────────────────────────────────────────────
@router.get("/dashboard", response_model=ApiResponse[DashboardStats], summary="Overview counters")
async def dashboard(
    user: User = Depends(require_portal),
    db: AsyncSession = Depends(get_db_session),
):
    return ApiResponse(data=await dashboard_service.get_dashboard_stats(db))


# ── Contact inquiries ─────────────────────────────────────────────────────
@router.get("/contacts", response_model=ApiResponse[ListData[ContactRead]], summary="List inquiries")
async def list_contacts(
    status: Optional[ContactStatus] = Query(default=None),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(require_portal),
    db: AsyncSession = Depends(get_db_session),
):
    rows, total = await contact_service.list(
        db, status=status.value if status else None, limit=limit, offset=offset
    )
    return ApiResponse(
        data=ListData(
            items=[ContactRead.model_validate(r) for r in rows], total=total, limit=limit, offset=offset
        )
    )


@router.get("/contacts/{contact_id}", response_model=ApiResponse[ContactRead], summary="Get an inquiry")
async def get_contact(
    contact_id: UUID,
    user: User = Depends(require_portal),
    db: AsyncSession = Depends(get_db_session),
):
    return ApiResponse(data=ContactRead.model_validate(await contact_service.get(db, contact_id)))


@router.patch(
    "/contacts/{contact_id}/status",
    response_model=ApiResponse[ContactRead],
    summary="Change an inquiry's status",
)
async def update_contact_status(
    contact_id: UUID,
    payload: ContactStatusUpdate,
    user: User = Depends(require_editor),
    db: AsyncSession = Depends(get_db_session),
):
    inquiry = await contact_service.set_status(db, contact_id, payload.status.value)
    return ApiResponse(
        message="Contact status updated successfully",
        data=ContactRead.model_validate(inquiry),
    )


@router.delete("/contacts/{contact_id}", response_model=MessageResponse, summary="Delete an inquiry")
async def delete_contact(
    contact_id: UUID,
    user: User = Depends(require_editor),
    db: AsyncSession = Depends(get_db_session),
):
    await contact_service.delete(db, contact_id)
    return MessageResponse(message="Contact deleted successfully")


# ── Users ─────────────────────────────────────────────────────────────────
@router.get("/users", response_model=ApiResponse[ListData[UserRead]], summary="List user accounts")
async def list_users(
    role: Optional[UserRole] = Query(default=None),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(require_full_admin),
    db: AsyncSession = Depends(get_db_session),
):
    rows, total = await auth_service.list_users(
        db, role=role.value if role else None, limit=limit, offset=offset
    )
    return ApiResponse(
        data=ListData(items=[UserRead.model_validate(u) for u in rows], total=total, limit=limit, offset=offset)
    )


@router.patch("/users/{user_id}", response_model=ApiResponse[UserRead], summary="Update a user account")
@router.put("/users/{user_id}", response_model=ApiResponse[UserRead], summary="Update a user account (PUT alias)")
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    user: User = Depends(require_full_admin),
    db: AsyncSession = Depends(get_db_session),
):
    updated = await auth_service.update_user(db, user_id, payload, acting_user=user)
    return ApiResponse(message="User updated successfully", data=UserRead.model_validate(updated))


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user account")
async def delete_user(
    user_id: UUID,
    user: User = Depends(require_full_admin),
    db: AsyncSession = Depends(get_db_session),
):
    await auth_service.delete_user(db, user_id, acting_user=user)
    return MessageResponse(message="User deleted successfully")


# ── Testimonials ──────────────────────────────────────────────────────────
router.include_router(
    build_crud_router(
        "/testimonials",
        "Admin",
        CrudResource(
            service=testimonial_service,
            create_schema=TestimonialCreate,
            update_schema=TestimonialUpdate,
            read_schema=TestimonialRead,
            status_enum=PublicationStatus,
            public_status=None,
            noun="Testimonial",
            read_dependency=require_portal,
        ),
    )
)


# ── Newsletter ────────────────────────────────────────────────────────────
@router.get(
    "/newsletter",
    response_model=ApiResponse[ListData[SubscriberRead]],
    summary="List newsletter subscribers",
)
async def list_newsletter(
    status: Optional[SubscriberStatus] = Query(default=None),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(require_portal),
    db: AsyncSession = Depends(get_db_session),
):
    rows, total = await lead_service.list_subscribers(
        db, status=status.value if status else None, limit=limit, offset=offset
    )
    return ApiResponse(
        data=ListData(
            items=[SubscriberRead.model_validate(s) for s in rows], total=total, limit=limit, offset=offset
        )
    )


# ── Estimate submissions ──────────────────────────────────────────────────
@router.get(
    "/estimates",
    response_model=ApiResponse[ListData[SubmissionRead]],
    summary="List recorded estimator runs",
)
async def list_estimates(
    status: Optional[SubmissionStatus] = Query(default=None),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(require_portal),
    db: AsyncSession = Depends(get_db_session),
):
    rows, total = await submission_service.list(
        db, status=status.value if status else None, limit=limit, offset=offset
    )
    return ApiResponse(
        data=ListData(
            items=[SubmissionRead.model_validate(s) for s in rows], total=total, limit=limit, offset=offset
        )
    )


@router.patch(
    "/estimates/{submission_id}/status",
    response_model=ApiResponse[SubmissionRead],
    summary="Change a submission's follow-up status",
)
async def update_estimate_status(
    submission_id: UUID,
    payload: SubmissionStatusUpdate,
    user: User = Depends(require_editor),
    db: AsyncSession = Depends(get_db_session),
):
    submission = await submission_service.set_status(db, submission_id, payload.status.value)
    return ApiResponse(
        message="Estimate status updated successfully",
        data=SubmissionRead.model_validate(submission),
    )


# ── Bulk operations ───────────────────────────────────────────────────────
@router.post(
    "/bulk-delete",
    response_model=ApiResponse[BulkDeleteResult],
    responses={400: {"description": "Unknown type or empty id list", "model": ErrorResponse}},
    summary="Delete many records of one collection",
)
async def bulk_delete(
    payload: BulkDeleteRequest,
    user: User = Depends(require_full_admin),
    db: AsyncSession = Depends(get_db_session),
):
    deleted = await BULK_DELETE_TARGETS[payload.type].bulk_delete(db, payload.ids)
    logger.info("Bulk delete by %s: %d %s", user.email, deleted, payload.type.value)
    return ApiResponse(
        message=f"{deleted} {payload.type.value} deleted successfully",
        data=BulkDeleteResult(type=payload.type, deleted=deleted),
    )


# ── Uploads ───────────────────────────────────────────────────────────────
@router.post(
    "/uploads",
    response_model=ApiResponse[UploadResult],
    status_code=http_status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid file type, content or size", "model": ErrorResponse}},
    summary="Upload an image",
    description="PNG, JPEG, GIF or WebP. The returned URL is served from /uploads.",
)
async def upload_image(
    request: Request,
    file: UploadFile = File(..., description="Image file"),
    user: User = Depends(require_editor),
):
    file_service: FileService = request.app.state.file_service
    try:
        content = await file.read()
        logger.info(
            "Received upload from %s: filename=%s, size=%d bytes",
            user.email,
            file.filename or "unknown",
            len(content),
        )
        url, content_type = await file_service.save_image(
            filename=file.filename or "",
            content=content,
            content_length=file.size,
        )
    finally:
        await file.close()

    return ApiResponse(
        message="File uploaded successfully",
        data=UploadResult(
            url=url,
            filename=url.rsplit("/", 1)[-1],
            size=len(content),
            content_type=content_type,
        ),
    )
