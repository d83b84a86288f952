"""
Input validation functions for the portal core.

All validation functions follow the pattern:
1. Accept raw input
2. Normalize/clean the input
3. Validate against business rules
4. Return cleaned value or raise a domain error
"""

import math

from eduportal.core.errors import InvalidGrade, ValidationError

GRADE_MIN = 0
GRADE_MAX = 100


# ============================================================================
# Grade Validation
# ============================================================================


def validate_grade(grade: float | int | None) -> float | None:
    """
    Validate a teacher-entered grade.

    None is allowed and means "clear the grade". Values outside [0, 100] are
    rejected, not clamped.

    Args:
        grade: Raw grade input

    Returns:
        Grade as float, or None

    Raises:
        InvalidGrade: If grade is not a finite number in range
    """
    if grade is None:
        return None

    # bool is an int subclass; True is not a grade
    if isinstance(grade, bool) or not isinstance(grade, int | float):
        raise InvalidGrade(f"Grade must be a number, got {grade!r}")

    if not math.isfinite(grade):
        raise InvalidGrade("Grade must be a finite number")

    if grade < GRADE_MIN or grade > GRADE_MAX:
        raise InvalidGrade(f"Grade must be between {GRADE_MIN} and {GRADE_MAX}, got {grade}")

    return float(grade)


# ============================================================================
# Enrollment Batch Validation
# ============================================================================


def validate_student_ids(student_ids: list[str] | None, max_batch: int) -> list[str]:
    """
    Normalize a batch of student ids for bulk enrollment.

    Strips whitespace and keeps the caller's order, including repeats (the
    enrollment guard reports repeats as already enrolled).

    Args:
        student_ids: Raw ids from the request
        max_batch: Upper bound on batch size

    Returns:
        Cleaned list of ids

    Raises:
        ValidationError: If the batch is empty, too large, or has blank ids
    """
    if not student_ids:
        raise ValidationError("At least one student id is required")

    if len(student_ids) > max_batch:
        raise ValidationError(
            f"Cannot enroll more than {max_batch} students at once (got {len(student_ids)})"
        )

    cleaned = [student_id.strip() for student_id in student_ids]
    if any(student_id == "" for student_id in cleaned):
        raise ValidationError("Student ids cannot be empty")

    return cleaned
