"""
Pixeloria Backend — Shared Model Columns
==========================================

What:  Identifier and timestamp columns every resource table carries.
Why:   Records are flat and uniform: a UUID that never changes, plus
       created_at / updated_at maintained by the ORM.

Column Design Rationale:
    - UUID primary key via SQLAlchemy's generic `Uuid` type: native UUID on
      PostgreSQL, CHAR(32) on SQLite, so the same models run in tests.
    - Python-side defaults (not server defaults): values are present on the
      instance right after flush, without an extra SELECT.
    - Timestamps are UTC; conversion to local time happens in the frontend.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordMixin:
    """Adds `id`, `created_at` and `updated_at` to a declarative model."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        status = getattr(self, "status", None) or getattr(self, "role", None)
        return f"<{type(self).__name__}(id={self.id}, status='{status}')>"
