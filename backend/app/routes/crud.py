"""
Pixeloria Backend — CRUD Router Factory
=========================================

What:  Builds the five standard endpoints for a content collection.
Why:   Portfolio, blogs, services, labs and admin testimonials expose the
       same shape; only the schemas, messages and visibility rules differ.

Endpoints (relative to the router prefix):
    GET    /         list (status, category, limit, offset)
    GET    /{id}     single record
    POST   /         create             → 201
    PATCH  /{id}     partial update (PUT accepted as an alias)
    DELETE /{id}     delete

Visibility:
    Anonymous callers only see records in the collection's public status
    (published / active). Asking for any other status, or fetching a
    non-public record by id, requires an admin-portal account; anonymous
    callers get 403 for the former and 404 for the latter, so drafts are
    not discoverable.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status as http_status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_optional_user, require_editor
from app.exceptions import AuthorizationError, NotFoundError
from app.models.enums import PORTAL_ROLES
from app.models.user import User
from app.schemas.common import ApiResponse, ErrorResponse, ListData, MessageResponse
from app.services.resource_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ResourceService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrudResource:
    """Everything that varies between content collections."""
    service: ResourceService
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    read_schema: Type[BaseModel]
    status_enum: Type[Enum]
    public_status: Optional[Enum]
    noun: str  # "Project" → "Project created successfully"
    write_dependency: Callable[..., Any] = require_editor
    # Set for admin-only collections; None leaves reads public
    read_dependency: Optional[Callable[..., Any]] = None


ERROR_RESPONSES = {
    400: {"description": "Validation error", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Insufficient permissions", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
}


def _is_portal_user(user: Optional[User]) -> bool:
    return user is not None and user.role in PORTAL_ROLES


def build_crud_router(prefix: str, tag: str, resource: CrudResource) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag], responses=ERROR_RESPONSES)

    Create = resource.create_schema
    Update = resource.update_schema
    Read = resource.read_schema
    StatusEnum = resource.status_enum
    public_value = resource.public_status.value if resource.public_status is not None else None
    read_dependencies = [Depends(resource.read_dependency)] if resource.read_dependency else []

    @router.get(
        "",
        response_model=ApiResponse[ListData[Read]],
        dependencies=read_dependencies,
        summary=f"List {tag.lower()}",
    )
    async def list_records(
        status: Optional[StatusEnum] = Query(  # type: ignore[valid-type]
            default=None,
            description="Filter by status; anonymous callers only see the public status",
        ),
        category: Optional[str] = Query(default=None, max_length=100),
        limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
        offset: int = Query(default=0, ge=0),
        user: Optional[User] = Depends(get_optional_user),
        db: AsyncSession = Depends(get_db_session),
    ):
        requested = status.value if status is not None else public_value
        if requested != public_value and not _is_portal_user(user):
            raise AuthorizationError("Admin portal access required to list unpublished records")

        rows, total = await resource.service.list(
            db, status=requested, category=category, limit=limit, offset=offset
        )
        return ApiResponse(
            data=ListData(
                items=[Read.model_validate(r) for r in rows],
                total=total,
                limit=limit,
                offset=offset,
            )
        )

    @router.get(
        "/{record_id}",
        response_model=ApiResponse[Read],
        dependencies=read_dependencies,
        summary=f"Get one {resource.noun.lower()}",
    )
    async def get_record(
        record_id: UUID,
        user: Optional[User] = Depends(get_optional_user),
        db: AsyncSession = Depends(get_db_session),
    ):
        record = await resource.service.get(db, record_id)
        if public_value is not None and record.status != public_value and not _is_portal_user(user):
            raise NotFoundError(resource=resource.service.display_name, resource_id=str(record_id))
        return ApiResponse(data=Read.model_validate(record))

    @router.post(
        "",
        response_model=ApiResponse[Read],
        status_code=http_status.HTTP_201_CREATED,
        summary=f"Create a {resource.noun.lower()}",
    )
    async def create_record(
        payload: Create,  # type: ignore[valid-type]
        user: User = Depends(resource.write_dependency),
        db: AsyncSession = Depends(get_db_session),
    ):
        record = await resource.service.create(db, payload)
        logger.info("%s %s created by %s", resource.noun, record.id, user.email)
        return ApiResponse(
            message=f"{resource.noun} created successfully",
            data=Read.model_validate(record),
        )

    @router.patch(
        "/{record_id}",
        response_model=ApiResponse[Read],
        summary=f"Update a {resource.noun.lower()}",
    )
    @router.put(
        "/{record_id}",
        response_model=ApiResponse[Read],
        summary=f"Update a {resource.noun.lower()} (PUT alias)",
    )
    async def update_record(
        record_id: UUID,
        payload: Update,  # type: ignore[valid-type]
        user: User = Depends(resource.write_dependency),
        db: AsyncSession = Depends(get_db_session),
    ):
        record = await resource.service.update(db, record_id, payload)
        return ApiResponse(
            message=f"{resource.noun} updated successfully",
            data=Read.model_validate(record),
        )

    @router.delete(
        "/{record_id}",
        response_model=MessageResponse,
        summary=f"Delete a {resource.noun.lower()}",
    )
    async def delete_record(
        record_id: UUID,
        user: User = Depends(resource.write_dependency),
        db: AsyncSession = Depends(get_db_session),
    ):
        await resource.service.delete(db, record_id)
        logger.info("%s %s deleted by %s", resource.noun, record_id, user.email)
        return MessageResponse(message=f"{resource.noun} deleted successfully")

    return router
