"""
Competency Models

Per-course competencies and student self-validations of them.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from .courses import Course


class Competency(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """A gradable skill or objective defined for exactly one course."""

    __tablename__ = "competence"
    __table_args__ = (Index("idx_competence_course", "course_id"),)

    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    course: Mapped[Course] = relationship()


class CompetencyValidation(Base):
    """A student's self-assertion that they master a competency.

    Keyed by (student_id, competency_id). Deleting the competency removes the
    validation at the database level; readers still tolerate stale ones.
    """

    __tablename__ = "competence_val"
    __table_args__ = (Index("idx_competence_val_competency", "competency_id"),)

    student_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    competency_id: Mapped[int] = mapped_column(
        ForeignKey("competence.id", ondelete="CASCADE"), primary_key=True
    )
    validated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
    )
