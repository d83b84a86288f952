"""
User Models

Portal accounts. Identity is owned by the external auth provider; the id
stored here is the opaque auth subject.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin

USER_ROLES = ("student", "teacher", "admin")


class User(Base, CreatedAtMixin):
    """A portal account with exactly one role."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('student', 'teacher', 'admin')", name="check_user_role"),
        Index("idx_users_role", "role"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, comment="Auth identity")
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    role: Mapped[str] = mapped_column(String(10), nullable=False, default="student")
