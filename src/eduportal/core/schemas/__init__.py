"""Pydantic schemas for store records and API validation."""

from .courses import (
    AssignmentCreate,
    AssignmentUpdate,
    CompetencyCreate,
    CompetencyUpdate,
    CourseCreate,
    EnrollmentRequest,
    EnrollmentResult,
    MaterialCreate,
    MaterialUpdate,
)
from .evaluations import EvaluationPatch, SubmissionCreate
from .progress import (
    AdminDashboard,
    AssignmentStatus,
    AssignmentStatusView,
    CompetencyView,
    CourseProgress,
    CourseProgressView,
    StudentDashboard,
    StudentProgressView,
    SystemStatistics,
    TeacherCourseView,
    TeacherDashboard,
)
from .records import (
    AssignmentRecord,
    CompetencyRecord,
    CompetencyValidationRecord,
    CourseAttachmentRecord,
    CourseRecord,
    CourseTeacherRecord,
    EnrollmentRecord,
    Record,
    SubmissionRecord,
    UserRecord,
)

__all__ = [
    # Records
    "Record",
    "UserRecord",
    "CourseRecord",
    "CourseTeacherRecord",
    "EnrollmentRecord",
    "CompetencyRecord",
    "CompetencyValidationRecord",
    "AssignmentRecord",
    "SubmissionRecord",
    "CourseAttachmentRecord",
    # Courses
    "CourseCreate",
    "CompetencyCreate",
    "CompetencyUpdate",
    "AssignmentCreate",
    "AssignmentUpdate",
    "MaterialCreate",
    "MaterialUpdate",
    "EnrollmentRequest",
    "EnrollmentResult",
    # Evaluations
    "SubmissionCreate",
    "EvaluationPatch",
    # Progress
    "AssignmentStatus",
    "AssignmentStatusView",
    "CourseProgress",
    "CompetencyView",
    "CourseProgressView",
    "StudentDashboard",
    "StudentProgressView",
    "TeacherCourseView",
    "TeacherDashboard",
    "SystemStatistics",
    "AdminDashboard",
]
