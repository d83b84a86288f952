"""
Assignment Models

Assignments and the student submissions (attempts) made against them.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin, TimestampMixin
from .courses import Course


class Assignment(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """Work set by a course teacher within an optional time window."""

    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint(
            "max_attempts IS NULL OR max_attempts >= 1", name="check_assignment_max_attempts"
        ),
        Index("idx_assignments_course", "course_id"),
    )

    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="homework", comment="homework, quiz, project, ..."
    )
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="Due date (informational)"
    )
    max_attempts: Mapped[int | None] = mapped_column(
        SmallInteger, nullable=True, comment="NULL = unlimited attempts"
    )

    course: Mapped[Course] = relationship()


class Submission(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    """One attempt by a student at an assignment, plus its evaluation."""

    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint(
            "assignment_id", "student_id", "attempt_number", name="uq_submission_attempt"
        ),
        CheckConstraint("attempt_number >= 1", name="check_submission_attempt_number"),
        CheckConstraint(
            "score IS NULL OR (score >= 0 AND score <= 100)", name="check_submission_score"
        ),
        Index("idx_submissions_student", "student_id"),
    )

    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False
    )
    student_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Evaluation (teacher-owned fields)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    evaluated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    graded_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    assignment: Mapped[Assignment] = relationship()
