"""
Progress and Dashboard Schemas

Derived, never-persisted state (course progress, assignment status) and the
per-role dashboard view models built from it.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from .records import (
    AssignmentRecord,
    CompetencyRecord,
    CourseRecord,
    SubmissionRecord,
    UserRecord,
)


class AssignmentStatus(StrEnum):
    """Lifecycle state of an assignment for one student."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    GRADED = "graded"


class CourseProgress(BaseModel):
    """Completion of one course by one student."""

    student_id: str
    course_id: int
    validated: int = Field(..., ge=0, description="Validated competencies still in the course")
    total: int = Field(..., ge=0, description="Competencies in the course")
    percentage: int = Field(..., ge=0, le=100)


class AssignmentStatusView(BaseModel):
    """Resolved status of one assignment for one student."""

    assignment: AssignmentRecord
    status: AssignmentStatus
    latest_submission: SubmissionRecord | None = None
    attempts_used: int = 0
    attempts_remaining: int | None = Field(None, description="NULL = unlimited")
    is_late: bool = False


# Student Dashboard
class CompetencyView(BaseModel):
    competency: CompetencyRecord
    validated: bool


class CourseProgressView(BaseModel):
    course: CourseRecord
    progress: int = Field(..., ge=0, le=100)
    competencies: list[CompetencyView]


class StudentDashboard(BaseModel):
    """Everything a student sees on their dashboard."""

    role: Literal["student"] = "student"
    user: UserRecord
    courses: list[CourseProgressView]
    assignments: list[AssignmentStatusView]
    integrity_warnings: list[str] = Field(default_factory=list)


# Teacher Dashboard
class StudentProgressView(BaseModel):
    student: UserRecord
    progress: int = Field(..., ge=0, le=100)


class TeacherCourseView(BaseModel):
    course: CourseRecord
    competency_count: int
    assignment_count: int
    students: list[StudentProgressView]
    average_progress: int = Field(..., ge=0, le=100)


class TeacherDashboard(BaseModel):
    """Courses taught by the teacher and submissions awaiting a grade."""

    role: Literal["teacher"] = "teacher"
    user: UserRecord
    courses: list[TeacherCourseView]
    pending_evaluations: list[SubmissionRecord]
    integrity_warnings: list[str] = Field(default_factory=list)


# Admin Dashboard
class SystemStatistics(BaseModel):
    users_by_role: dict[str, int]
    courses: int
    enrollments: int
    submissions: int
    pending_evaluations: int


class AdminDashboard(BaseModel):
    """All accounts plus platform-wide counts."""

    role: Literal["admin"] = "admin"
    user: UserRecord
    users: list[UserRecord]
    statistics: SystemStatistics
