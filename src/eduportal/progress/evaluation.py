"""
Evaluation Mutator

Applies a teacher's grade and/or feedback to a submission. Each call is a
single merged write that also stamps the evaluation time; a graded
submission resolves to "graded" on the next read with no publish step.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from eduportal.core.errors import IntegrityWarning, RecordNotFound, ValidationError
from eduportal.core.schemas.progress import AssignmentStatus
from eduportal.core.validation import validate_grade
from eduportal.progress.enrollment import EnrollmentGuard, screen_submissions
from eduportal.progress.status import resolve_status
from eduportal.store import Entity

if TYPE_CHECKING:
    from eduportal.core.schemas.evaluations import EvaluationPatch
    from eduportal.core.schemas.records import (
        AssignmentRecord,
        CourseTeacherRecord,
        EnrollmentRecord,
        SubmissionRecord,
    )
    from eduportal.store import RecordStore

logger = logging.getLogger(__name__)


def select_pending(
    submissions: Iterable[SubmissionRecord],
    assignments: Iterable[AssignmentRecord],
    enrollments: Iterable[EnrollmentRecord],
) -> tuple[list[SubmissionRecord], list[IntegrityWarning]]:
    """Pick the submissions awaiting a grade.

    Orphaned submissions are screened out first. Of the remaining ones, only
    the latest attempt of each (assignment, student) counts, and only while
    it resolves to "submitted"; an earlier ungraded attempt superseded by a
    graded one is not pending.

    Args:
        submissions: Every submission for the assignments concerned
        assignments: Assignments the submissions may reference
        enrollments: Enrollments of the courses concerned

    Returns:
        (pending submissions ordered by id, integrity warnings)
    """
    assignments = list(assignments)
    kept, warnings = screen_submissions(submissions, assignments, enrollments)
    by_id = {a.id: a for a in assignments}

    attempts: defaultdict[tuple[int, str], list[SubmissionRecord]] = defaultdict(list)
    for submission in kept:
        attempts[(submission.assignment_id, submission.student_id)].append(submission)

    pending = []
    for (assignment_id, _), own in attempts.items():
        resolution = resolve_status(by_id[assignment_id], own)
        if resolution.status == AssignmentStatus.SUBMITTED:
            pending.append(resolution.latest_submission)

    pending.sort(key=lambda s: s.id)
    return pending, warnings


class EvaluationMutator:
    """Merges teacher evaluations into submissions."""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] | None = None):
        self.store = store
        self.clock = clock or (lambda: datetime.now(UTC))
        self.guard = EnrollmentGuard(store)

    async def apply_evaluation(
        self, submission_id: int, patch: EvaluationPatch, grader_id: str
    ) -> SubmissionRecord:
        """Merge a grade/feedback patch into a submission.

        Only the fields present in `patch` are written; the other evaluation
        field keeps its stored value. Every call sets evaluated_at and
        graded_by, whichever field changed.

        Args:
            submission_id: Submission to evaluate
            patch: Grade and/or feedback
            grader_id: Acting teacher

        Returns:
            The updated submission as stored

        Raises:
            ValidationError: If the patch carries neither grade nor feedback
            InvalidGrade: If the grade is outside [0, 100]
            RecordNotFound: If the submission or its assignment is missing
            Forbidden: If the grader does not teach the owning course
        """
        changes = patch.changes()
        if not changes:
            raise ValidationError("Evaluation must include a grade or feedback")
        if "score" in changes:
            changes["score"] = validate_grade(changes["score"])

        submission: SubmissionRecord | None = await self.store.get(
            Entity.SUBMISSIONS, submission_id
        )
        if submission is None:
            raise RecordNotFound(Entity.SUBMISSIONS, submission_id)

        assignment: AssignmentRecord | None = await self.store.get(
            Entity.ASSIGNMENTS, submission.assignment_id
        )
        if assignment is None:
            raise RecordNotFound(Entity.ASSIGNMENTS, submission.assignment_id)

        await self.guard.require_role(grader_id, "teacher")
        await self.guard.require_course_teacher(assignment.course_id, grader_id)

        updated: SubmissionRecord = await self.store.update(
            Entity.SUBMISSIONS,
            submission_id,
            {**changes, "evaluated_at": self.clock(), "graded_by": grader_id},
        )
        logger.info(
            f"Teacher {grader_id} evaluated submission {submission_id} "
            f"(fields: {', '.join(sorted(changes))})"
        )
        return updated

    async def pending_evaluations(self, teacher_id: str) -> list[SubmissionRecord]:
        """Latest ungraded attempts by enrolled students in the teacher's courses."""
        links: list[CourseTeacherRecord] = await self.store.fetch(
            Entity.COURSE_TEACHERS, {"teacher_id": teacher_id}
        )
        course_ids = [link.course_id for link in links]
        if not course_ids:
            return []

        assignments: list[AssignmentRecord] = await self.store.fetch(
            Entity.ASSIGNMENTS, {"course_id": course_ids}
        )
        if not assignments:
            return []

        enrollments: list[EnrollmentRecord] = await self.store.fetch(
            Entity.ENROLLMENTS, {"course_id": course_ids}
        )
        submissions: list[SubmissionRecord] = await self.store.fetch(
            Entity.SUBMISSIONS, {"assignment_id": [a.id for a in assignments]}
        )
        pending, _ = select_pending(submissions, assignments, enrollments)
        return pending
