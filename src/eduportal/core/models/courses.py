"""
Course Models

Courses, their teachers, student enrollments and attached materials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .users import User

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin, TimestampMixin


class Course(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    """A course owned by one or more teachers."""

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class CourseTeacher(Base, CreatedAtMixin):
    """Association between a course and a teacher who owns its content."""

    __tablename__ = "course_teachers"
    __table_args__ = (Index("idx_course_teachers_teacher", "teacher_id"),)

    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True
    )
    teacher_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    course: Mapped[Course] = relationship()
    teacher: Mapped[User] = relationship()


class Enrollment(Base, CreatedAtMixin):
    """A student's enrollment in a course.

    Composite primary key makes (student, course) unique. Created by a teacher
    action, never by the student.
    """

    __tablename__ = "enrollments"
    __table_args__ = (Index("idx_enrollments_course", "course_id"),)

    student_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True
    )

    student: Mapped[User] = relationship()
    course: Mapped[Course] = relationship()


class CourseAttachment(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    """Course material metadata. The file itself lives in external storage."""

    __tablename__ = "course_attachments"
    __table_args__ = (Index("idx_course_attachments_course", "course_id"),)

    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)

    course: Mapped[Course] = relationship()
