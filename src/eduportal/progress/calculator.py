"""
Competency Progress Calculator

Derives a student's completion percentage for a course from the course's
competencies and the student's competency validations.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from eduportal.core.schemas.progress import CourseProgress

if TYPE_CHECKING:
    from eduportal.core.schemas.records import CompetencyRecord, CompetencyValidationRecord


def _round_half_up_percentage(part: int, whole: int) -> int:
    """round(100 * part / whole), halves rounded up, in exact integer arithmetic."""
    return (200 * part + whole) // (2 * whole)


def count_validated(
    competencies: Iterable[CompetencyRecord],
    validations: Iterable[CompetencyValidationRecord],
) -> tuple[int, int]:
    """Count (validated, total) for a competency set.

    Validations referencing a competency outside the set are ignored, which
    covers validations for other courses and validations left behind after a
    competency was deleted. Repeated validations of one competency count once.
    """
    competency_ids = {competency.id for competency in competencies}
    validated_ids = {v.competency_id for v in validations} & competency_ids
    return len(validated_ids), len(competency_ids)


def compute_progress(
    competencies: Iterable[CompetencyRecord],
    validations: Iterable[CompetencyValidationRecord],
) -> int:
    """Percentage (0-100) of a course's competencies the student validated.

    Args:
        competencies: Every competency of one course
        validations: The student's validations, possibly spanning many courses

    Returns:
        Rounded percentage; 0 when the course has no competencies
    """
    validated, total = count_validated(competencies, validations)
    if total == 0:
        return 0
    return _round_half_up_percentage(validated, total)


def compute_course_progress(
    student_id: str,
    course_id: int,
    competencies: Iterable[CompetencyRecord],
    validations: Iterable[CompetencyValidationRecord],
) -> CourseProgress:
    """Same as compute_progress, packaged with its counts for one (student, course)."""
    course_competencies = [c for c in competencies if c.course_id == course_id]
    student_validations = [v for v in validations if v.student_id == student_id]
    validated, total = count_validated(course_competencies, student_validations)
    return CourseProgress(
        student_id=student_id,
        course_id=course_id,
        validated=validated,
        total=total,
        percentage=_round_half_up_percentage(validated, total) if total else 0,
    )
