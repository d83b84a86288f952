"""
Typed Entity Records

Immutable snapshots of store rows. The record store maps ORM rows into these
so core logic never touches raw rows or ORM instances.
"""

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict


def _ensure_utc(value: datetime) -> datetime:
    """Backends without timezone support hand back naive datetimes; they are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(_ensure_utc)]

UserRole = Literal["student", "teacher", "admin"]


class Record(BaseModel):
    """Base for all store records."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class UserRecord(Record):
    id: str
    email: str
    full_name: str | None = None
    role: UserRole
    created_at: UTCDateTime


class CourseRecord(Record):
    id: int
    title: str
    description: str | None = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class CourseTeacherRecord(Record):
    course_id: int
    teacher_id: str
    created_at: UTCDateTime


class EnrollmentRecord(Record):
    student_id: str
    course_id: int
    created_at: UTCDateTime


class CompetencyRecord(Record):
    id: int
    course_id: int
    title: str
    description: str | None = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class CompetencyValidationRecord(Record):
    student_id: str
    competency_id: int
    validated_at: UTCDateTime


class AssignmentRecord(Record):
    id: int
    course_id: int
    title: str
    description: str | None = None
    type: str
    start_date: UTCDateTime | None = None
    end_date: UTCDateTime | None = None
    max_attempts: int | None = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class SubmissionRecord(Record):
    id: int
    assignment_id: int
    student_id: str
    attempt_number: int
    content: str
    submitted_at: UTCDateTime | None = None
    score: float | None = None
    feedback: str | None = None
    evaluated_at: UTCDateTime | None = None
    graded_by: str | None = None
    created_at: UTCDateTime


class CourseAttachmentRecord(Record):
    id: int
    course_id: int
    title: str
    description: str | None = None
    file_url: str
    created_at: UTCDateTime
