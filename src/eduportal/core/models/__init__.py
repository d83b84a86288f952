"""
Portal SQLAlchemy Models

One module per aggregate: users, courses, competencies, assignments.
"""

from .assignments import Assignment, Submission
from .base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin, TimestampMixin
from .competencies import Competency, CompetencyValidation
from .courses import Course, CourseAttachment, CourseTeacher, Enrollment
from .users import USER_ROLES, User

__all__ = [
    # Base
    "Base",
    "IntegerPrimaryKeyMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    # Users
    "User",
    "USER_ROLES",
    # Courses
    "Course",
    "CourseTeacher",
    "Enrollment",
    "CourseAttachment",
    # Competencies
    "Competency",
    "CompetencyValidation",
    # Assignments
    "Assignment",
    "Submission",
]
