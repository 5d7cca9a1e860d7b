"""
Pixeloria Backend — Generic Resource Service
==============================================

What:  List / get / create / update / delete for any flat record table.
Why:   Portfolio, blogs, services, labs, testimonials, contacts and estimate
       submissions share the same CRUD shape; only the model, schemas and
       display name differ.
How:   One `ResourceService` instance per resource, configured with the ORM
       model and its Create schema. Sessions are passed in per call, so the
       instances are stateless and safe to share across requests.

Listing:
    Filters: status, category (where the table has one). Newest first.
    Returns `(rows, total)` where `total` ignores limit/offset.

Error Handling:
    - Missing row             → NotFoundError("<Display name> not found")
    - Null for a NOT NULL column → ValidationError naming the field
    - SQLAlchemyError         → DatabaseError (driver details only in logs)
"""

import logging
import uuid
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import DatabaseError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ResourceService(Generic[ModelT]):
    """
    CRUD operations for one table.

    Args:
        model:          ORM class (must use RecordMixin); its NOT NULL
                        columns may not be set to null by an update
        display_name:   Used in messages, e.g. "Project" → "Project not found"
    """

    def __init__(
        self,
        model: Type[ModelT],
        *,
        display_name: str,
    ):
        self.model = model
        self.display_name = display_name
        self.non_nullable = frozenset(
            column.name
            for column in model.__table__.columns
            if not column.nullable and not column.primary_key
        )

    def __repr__(self) -> str:
        return f"<ResourceService({self.model.__tablename__})>"

    # ── Reads ─────────────────────────────────────────────────────────────
    async def list(
        self,
        db: AsyncSession,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Tuple[List[ModelT], int]:
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        conditions = []
        if status is not None:
            conditions.append(self.model.status == status)
        if category is not None and hasattr(self.model, "category"):
            conditions.append(self.model.category == category)

        try:
            total = await db.scalar(
                select(func.count()).select_from(self.model).where(*conditions)
            )
            result = await db.execute(
                select(self.model)
                .where(*conditions)
                .order_by(self.model.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("list", e) from e

        return rows, total or 0

    async def get(self, db: AsyncSession, record_id: uuid.UUID) -> ModelT:
        try:
            record = await db.get(self.model, record_id)
        except SQLAlchemyError as e:
            raise self._database_error("get", e) from e

        if record is None:
            raise NotFoundError(resource=self.display_name, resource_id=str(record_id))
        return record

    # ── Writes ────────────────────────────────────────────────────────────
    async def create(self, db: AsyncSession, payload: BaseModel) -> ModelT:
        record = self.model(**payload.model_dump(mode="json"))
        db.add(record)
        try:
            await db.flush()
            await db.refresh(record)
        except SQLAlchemyError as e:
            raise self._database_error("create", e) from e

        logger.info("%s created: %s", self.display_name, record.id)
        return record

    async def update(
        self,
        db: AsyncSession,
        record_id: uuid.UUID,
        payload: BaseModel,
    ) -> ModelT:
        """Apply only the fields present in the request body."""
        changes = payload.model_dump(mode="json", exclude_unset=True)
        self._reject_nulls(changes)

        record = await self.get(db, record_id)
        for key, value in changes.items():
            setattr(record, key, value)

        try:
            await db.flush()
            await db.refresh(record)
        except SQLAlchemyError as e:
            raise self._database_error("update", e) from e

        logger.info("%s updated: %s (%s)", self.display_name, record.id, ", ".join(changes) or "no changes")
        return record

    async def set_status(self, db: AsyncSession, record_id: uuid.UUID, status: str) -> ModelT:
        record = await self.get(db, record_id)
        record.status = status
        try:
            await db.flush()
            await db.refresh(record)
        except SQLAlchemyError as e:
            raise self._database_error("set_status", e) from e
        return record

    async def delete(self, db: AsyncSession, record_id: uuid.UUID) -> None:
        record = await self.get(db, record_id)
        try:
            await db.delete(record)
            await db.flush()
        except SQLAlchemyError as e:
            raise self._database_error("delete", e) from e
        logger.info("%s deleted: %s", self.display_name, record_id)

    async def bulk_delete(self, db: AsyncSession, record_ids: Iterable[uuid.UUID]) -> int:
        """Delete every listed id that exists; returns the number removed."""
        ids: Sequence[uuid.UUID] = list(dict.fromkeys(record_ids))
        if not ids:
            return 0
        try:
            result = await db.execute(delete(self.model).where(self.model.id.in_(ids)))
        except SQLAlchemyError as e:
            raise self._database_error("bulk_delete", e) from e
        deleted = result.rowcount or 0
        logger.info("%s bulk delete: %d of %d removed", self.display_name, deleted, len(ids))
        return deleted

    # ── Helpers ───────────────────────────────────────────────────────────
    def _reject_nulls(self, changes: Dict[str, Any]) -> None:
        for key in sorted(self.non_nullable):
            if key in changes and changes[key] is None:
                raise ValidationError(message=f"{key} cannot be null", field=key)

    def _database_error(self, operation: str, error: Exception) -> DatabaseError:
        logger.error(
            "Database error during %s on %s: %s",
            operation,
            self.model.__tablename__,
            error,
            exc_info=True,
        )
        return DatabaseError(
            context={
                "operation": operation,
                "table": self.model.__tablename__,
                "error_type": type(error).__name__,
            }
        )
