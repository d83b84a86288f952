"""
Progress & Evaluation Module

Competency progress, assignment status, enrollment consistency, evaluation
and the dashboards composed from them.
"""

from .calculator import compute_course_progress, compute_progress
from .content import CourseContent, CourseContentManager
from .dashboard import DashboardAggregator
from .enrollment import EnrollmentGuard, screen_submissions, screen_validations
from .evaluation import EvaluationMutator
from .status import StatusResolution, check_attempt_admission, resolve_status

__all__ = [
    "compute_progress",
    "compute_course_progress",
    "resolve_status",
    "check_attempt_admission",
    "StatusResolution",
    "EnrollmentGuard",
    "screen_validations",
    "screen_submissions",
    "EvaluationMutator",
    "CourseContent",
    "CourseContentManager",
    "DashboardAggregator",
]
