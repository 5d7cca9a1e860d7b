"""
User accounts: the auto-provisioned admin, dashboard staff and site clients.

E-mail is unique and stored lower-cased; the password is only ever stored as
a bcrypt hash.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.base import RecordMixin
from app.models.enums import UserRole


class User(RecordMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.CLIENT.value,
    )
