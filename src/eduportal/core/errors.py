"""
Domain errors for the education portal.

Authorization and validation errors are terminal for the action that raised
them and are surfaced to the caller verbatim. IntegrityWarning is not an
exception: it is collected, logged and reported alongside derived results.
"""

from __future__ import annotations

from dataclasses import dataclass


class PortalError(Exception):
    """Base class for all portal domain errors."""

    pass


class NotEnrolled(PortalError):
    """Student has no enrollment in the course owning the target record."""

    def __init__(self, student_id: str, course_id: int):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__(f"Student {student_id} is not enrolled in course {course_id}")


class AttemptLimitExceeded(PortalError):
    """Student has used every attempt the assignment allows."""

    def __init__(self, assignment_id: int, max_attempts: int):
        self.assignment_id = assignment_id
        self.max_attempts = max_attempts
        super().__init__(
            f"Assignment {assignment_id} allows at most {max_attempts} attempt(s)"
        )


class InvalidGrade(PortalError):
    """Grade is not a number in [0, 100]."""

    pass


class Forbidden(PortalError):
    """Actor is not allowed to perform the action."""

    pass


class ValidationError(PortalError):
    """Raised when user input fails validation."""

    pass


class RecordNotFound(PortalError):
    """A referenced record does not exist in the store."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found with key: {key}")


class StoreError(PortalError):
    """Backend or network failure while talking to the record store."""

    pass


@dataclass(frozen=True)
class IntegrityWarning:
    """Orphaned record detected while deriving progress or status.

    Attributes:
        kind: Entity of the offending record (e.g. "competence_val")
        key: Identifying key of the record
        reason: Human readable explanation
    """

    kind: str
    key: str
    reason: str

    def __str__(self) -> str:
        return f"{self.kind}[{self.key}]: {self.reason}"
