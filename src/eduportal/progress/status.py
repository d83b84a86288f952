"""
Assignment Status Resolver

Derives the lifecycle state of an assignment for one student from that
student's submissions, and decides whether another attempt is admitted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from eduportal.core.errors import AttemptLimitExceeded
from eduportal.core.schemas.progress import AssignmentStatus
from eduportal.core.schemas.records import AssignmentRecord, SubmissionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusResolution:
    """Resolved status and the submission it was derived from.

    Attributes:
        status: pending, submitted or graded
        latest_submission: Highest attempt, or None when nothing was submitted
    """

    status: AssignmentStatus
    latest_submission: SubmissionRecord | None = None


def latest_submission(submissions: Iterable[SubmissionRecord]) -> SubmissionRecord | None:
    """Pick the submission with the highest attempt number.

    Two submissions sharing the highest attempt number is a data integrity
    fault; the most recently created one wins.
    """
    candidates = list(submissions)
    if not candidates:
        return None

    top_attempt = max(s.attempt_number for s in candidates)
    top = [s for s in candidates if s.attempt_number == top_attempt]
    if len(top) > 1:
        logger.warning(
            f"Duplicate attempt {top_attempt} for assignment {top[0].assignment_id}, "
            f"student {top[0].student_id}: using most recent"
        )
    return max(top, key=lambda s: (s.created_at, s.id))


def resolve_status(
    assignment: AssignmentRecord, submissions_for_student: Iterable[SubmissionRecord]
) -> StatusResolution:
    """Resolve an assignment's status for one student.

    Rules, first match wins:
    1. No submissions -> pending
    2. Latest submission has a score -> graded (feedback is irrelevant)
    3. Latest submission has a submission timestamp -> submitted
    4. Otherwise -> pending

    Lateness never changes the status.

    Args:
        assignment: The assignment being resolved
        submissions_for_student: The student's submissions; rows for other
            assignments are ignored

    Returns:
        StatusResolution
    """
    relevant = [s for s in submissions_for_student if s.assignment_id == assignment.id]
    latest = latest_submission(relevant)

    if latest is None:
        return StatusResolution(status=AssignmentStatus.PENDING)
    if latest.score is not None:
        return StatusResolution(status=AssignmentStatus.GRADED, latest_submission=latest)
    if latest.submitted_at is not None:
        return StatusResolution(status=AssignmentStatus.SUBMITTED, latest_submission=latest)
    return StatusResolution(status=AssignmentStatus.PENDING, latest_submission=latest)


def is_late(assignment: AssignmentRecord, submission: SubmissionRecord | None) -> bool:
    """Whether a submission arrived after the due date. Display only."""
    if submission is None or submission.submitted_at is None or assignment.end_date is None:
        return False
    return submission.submitted_at > assignment.end_date


def attempts_remaining(assignment: AssignmentRecord, attempts_used: int) -> int | None:
    """Attempts left, or None when the assignment allows unlimited attempts."""
    if assignment.max_attempts is None:
        return None
    return max(0, assignment.max_attempts - attempts_used)


def check_attempt_admission(
    assignment: AssignmentRecord, existing_submissions: Iterable[SubmissionRecord]
) -> None:
    """Reject a new attempt once the student has used every allowed attempt.

    Raises:
        AttemptLimitExceeded: If max_attempts is set and has been reached
    """
    if assignment.max_attempts is None:
        return

    used = sum(1 for s in existing_submissions if s.assignment_id == assignment.id)
    if used >= assignment.max_attempts:
        raise AttemptLimitExceeded(assignment.id, assignment.max_attempts)


def next_attempt_number(existing_submissions: Iterable[SubmissionRecord]) -> int:
    """Attempt numbers only ever grow: one past the highest existing attempt."""
    return max((s.attempt_number for s in existing_submissions), default=0) + 1
