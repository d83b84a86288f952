"""
Enrollment Consistency Guard

Decides which (student, course) pairs may carry competency validations,
submissions and progress, and performs the student-side writes that depend on
an enrollment. Also screens already-stored records for ones that lost their
backing enrollment.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from eduportal.config import settings
from eduportal.core.errors import (
    Forbidden,
    IntegrityWarning,
    NotEnrolled,
    RecordNotFound,
    ValidationError,
)
from eduportal.core.schemas.courses import EnrollmentResult
from eduportal.core.validation import validate_student_ids
from eduportal.progress.status import check_attempt_admission, next_attempt_number
from eduportal.store import Entity

if TYPE_CHECKING:
    from collections.abc import Callable

    from eduportal.core.schemas.records import (
        AssignmentRecord,
        CompetencyRecord,
        CompetencyValidationRecord,
        CourseRecord,
        EnrollmentRecord,
        SubmissionRecord,
        UserRecord,
    )
    from eduportal.store import RecordStore

logger = logging.getLogger(__name__)


# ============================================================================
# Defensive screening of stored records
# ============================================================================


def _enrolled_pairs(enrollments: Iterable[EnrollmentRecord]) -> set[tuple[str, int]]:
    return {(e.student_id, e.course_id) for e in enrollments}


def screen_validations(
    validations: Iterable[CompetencyValidationRecord],
    competencies: Iterable[CompetencyRecord],
    enrollments: Iterable[EnrollmentRecord],
) -> tuple[list[CompetencyValidationRecord], list[IntegrityWarning]]:
    """Drop validations without a competency or without a backing enrollment.

    Args:
        validations: Stored validations to screen
        competencies: Competencies the validations may reference
        enrollments: Enrollments of the students concerned

    Returns:
        (kept validations, integrity warnings for the dropped ones)
    """
    by_id = {c.id: c for c in competencies}
    pairs = _enrolled_pairs(enrollments)
    kept: list[CompetencyValidationRecord] = []
    warnings: list[IntegrityWarning] = []

    for validation in validations:
        key = f"{validation.student_id}:{validation.competency_id}"
        competency = by_id.get(validation.competency_id)
        if competency is None:
            warnings.append(
                IntegrityWarning("competence_val", key, "references a missing competency")
            )
        elif (validation.student_id, competency.course_id) not in pairs:
            warnings.append(
                IntegrityWarning(
                    "competence_val",
                    key,
                    f"student not enrolled in course {competency.course_id}",
                )
            )
        else:
            kept.append(validation)

    for warning in warnings:
        logger.warning(f"Integrity warning: {warning}")
    return kept, warnings


def screen_submissions(
    submissions: Iterable[SubmissionRecord],
    assignments: Iterable[AssignmentRecord],
    enrollments: Iterable[EnrollmentRecord],
) -> tuple[list[SubmissionRecord], list[IntegrityWarning]]:
    """Drop submissions without an assignment or without a backing enrollment."""
    by_id = {a.id: a for a in assignments}
    pairs = _enrolled_pairs(enrollments)
    kept: list[SubmissionRecord] = []
    warnings: list[IntegrityWarning] = []

    for submission in submissions:
        assignment = by_id.get(submission.assignment_id)
        if assignment is None:
            warnings.append(
                IntegrityWarning(
                    "submissions", str(submission.id), "references a missing assignment"
                )
            )
        elif (submission.student_id, assignment.course_id) not in pairs:
            warnings.append(
                IntegrityWarning(
                    "submissions",
                    str(submission.id),
                    f"student not enrolled in course {assignment.course_id}",
                )
            )
        else:
            kept.append(submission)

    for warning in warnings:
        logger.warning(f"Integrity warning: {warning}")
    return kept, warnings


# ============================================================================
# Guard
# ============================================================================


class EnrollmentGuard:
    """Enforces enrollment-backed access for student actions.

    Every check reads the store; nothing is cached between calls, so a
    check always reflects the latest committed enrollment state.
    """

    def __init__(
        self,
        store: RecordStore,
        max_batch: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the guard.

        Args:
            store: Record store for this request
            max_batch: Bulk enroll limit (defaults to settings)
            clock: Source of "now" for submission timestamps
        """
        self.store = store
        self.max_batch = max_batch or settings.MAX_ENROLLMENT_BATCH
        self.clock = clock or (lambda: datetime.now(UTC))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def is_enrolled(self, student_id: str, course_id: int) -> bool:
        enrollment = await self.store.get(
            Entity.ENROLLMENTS, {"student_id": student_id, "course_id": course_id}
        )
        return enrollment is not None

    async def can_validate_competency(self, student_id: str, competency_id: int) -> bool:
        """True iff the student is enrolled in the competency's course."""
        competency: CompetencyRecord | None = await self.store.get(
            Entity.COMPETENCIES, competency_id
        )
        if competency is None:
            return False
        return await self.is_enrolled(student_id, competency.course_id)

    async def can_submit(self, student_id: str, assignment_id: int) -> bool:
        """True iff the student is enrolled in the assignment's course."""
        assignment: AssignmentRecord | None = await self.store.get(
            Entity.ASSIGNMENTS, assignment_id
        )
        if assignment is None:
            return False
        return await self.is_enrolled(student_id, assignment.course_id)

    async def require_competency_access(
        self, student_id: str, competency_id: int
    ) -> CompetencyRecord:
        """Return the competency, or raise if the student may not validate it.

        Raises:
            RecordNotFound: If the competency does not exist
            NotEnrolled: If the student is not enrolled in its course
        """
        competency: CompetencyRecord | None = await self.store.get(
            Entity.COMPETENCIES, competency_id
        )
        if competency is None:
            raise RecordNotFound(Entity.COMPETENCIES, competency_id)
        if not await self.is_enrolled(student_id, competency.course_id):
            raise NotEnrolled(student_id, competency.course_id)
        return competency

    async def require_assignment_access(
        self, student_id: str, assignment_id: int
    ) -> AssignmentRecord:
        """Return the assignment, or raise if the student may not submit to it.

        Raises:
            RecordNotFound: If the assignment does not exist
            NotEnrolled: If the student is not enrolled in its course
        """
        assignment: AssignmentRecord | None = await self.store.get(
            Entity.ASSIGNMENTS, assignment_id
        )
        if assignment is None:
            raise RecordNotFound(Entity.ASSIGNMENTS, assignment_id)
        if not await self.is_enrolled(student_id, assignment.course_id):
            raise NotEnrolled(student_id, assignment.course_id)
        return assignment

    async def require_role(self, user_id: str, role: str) -> UserRecord:
        """Return the user if they hold `role`, else raise Forbidden."""
        user: UserRecord | None = await self.store.get(Entity.USERS, user_id)
        if user is None or user.role != role:
            raise Forbidden(f"User {user_id} is not a {role}")
        return user

    async def require_course_teacher(self, course_id: int, user_id: str) -> CourseRecord:
        """Return the course if `user_id` is one of its teachers.

        Raises:
            RecordNotFound: If the course does not exist
            Forbidden: If the user does not teach the course
        """
        course: CourseRecord | None = await self.store.get(Entity.COURSES, course_id)
        if course is None:
            raise RecordNotFound(Entity.COURSES, course_id)

        link = await self.store.get(
            Entity.COURSE_TEACHERS, {"course_id": course_id, "teacher_id": user_id}
        )
        if link is None:
            raise Forbidden(f"User {user_id} does not teach course {course_id}")
        return course

    # ------------------------------------------------------------------
    # Enrollment writes (teacher-initiated)
    # ------------------------------------------------------------------

    async def enroll(self, course_id: int, student_ids: list[str]) -> list[EnrollmentResult]:
        """Enroll a batch of students, skipping those already enrolled.

        All new enrollments are written by a single insert, so the batch is
        applied entirely or not at all. Ids repeated within the batch are
        reported as alreadyEnrolled after their first occurrence.

        Returns:
            One EnrollmentResult per requested id, in request order

        Raises:
            RecordNotFound: If the course does not exist
            ValidationError: If any id is blank, unknown, or not a student, or
                the batch exceeds the configured limit
            StoreError: If the store rejects the batch
        """
        ids = validate_student_ids(student_ids, self.max_batch)

        if await self.store.get(Entity.COURSES, course_id) is None:
            raise RecordNotFound(Entity.COURSES, course_id)

        unique_ids = list(dict.fromkeys(ids))
        users: list[UserRecord] = await self.store.fetch(Entity.USERS, {"id": unique_ids})
        students = {u.id for u in users if u.role == "student"}
        invalid = [student_id for student_id in unique_ids if student_id not in students]
        if invalid:
            raise ValidationError(f"Not student accounts: {', '.join(invalid)}")

        existing: list[EnrollmentRecord] = await self.store.fetch(
            Entity.ENROLLMENTS, {"course_id": course_id, "student_id": unique_ids}
        )
        enrolled = {e.student_id for e in existing}

        results: list[EnrollmentResult] = []
        new_rows: list[dict[str, str | int]] = []
        for student_id in ids:
            if student_id in enrolled:
                results.append(EnrollmentResult(student_id=student_id, outcome="alreadyEnrolled"))
                continue
            enrolled.add(student_id)
            new_rows.append({"student_id": student_id, "course_id": course_id})
            results.append(EnrollmentResult(student_id=student_id, outcome="enrolled"))

        await self.store.insert(Entity.ENROLLMENTS, new_rows)
        logger.info(
            f"Enrolled {len(new_rows)} student(s) in course {course_id} "
            f"({len(ids) - len(new_rows)} already enrolled)"
        )
        return results

    async def unenroll(self, course_id: int, student_id: str) -> None:
        """Remove an enrollment.

        The student's validations and submissions for the course stay in the
        store; readers screen them out as orphans.

        Raises:
            RecordNotFound: If the student is not enrolled
        """
        await self.store.delete(
            Entity.ENROLLMENTS, {"student_id": student_id, "course_id": course_id}
        )
        logger.info(f"Unenrolled student {student_id} from course {course_id}")

    # ------------------------------------------------------------------
    # Student writes
    # ------------------------------------------------------------------

    async def validate_competency(
        self, student_id: str, competency_id: int
    ) -> CompetencyValidationRecord:
        """Record the student's self-validation of a competency (idempotent).

        Raises:
            Forbidden: If the actor is not a student
            RecordNotFound: If the competency does not exist
            NotEnrolled: If the student is not enrolled in its course
        """
        await self.require_role(student_id, "student")
        await self.require_competency_access(student_id, competency_id)

        key = {"student_id": student_id, "competency_id": competency_id}
        existing: CompetencyValidationRecord | None = await self.store.get(
            Entity.COMPETENCY_VALIDATIONS, key
        )
        if existing is not None:
            return existing

        (created,) = await self.store.insert(Entity.COMPETENCY_VALIDATIONS, [key])
        return created

    async def unvalidate_competency(self, student_id: str, competency_id: int) -> None:
        """Withdraw the student's validation of a competency (idempotent).

        Raises:
            Forbidden: If the actor is not a student
            RecordNotFound: If the competency does not exist
            NotEnrolled: If the student is not enrolled in its course
        """
        await self.require_role(student_id, "student")
        await self.require_competency_access(student_id, competency_id)

        key = {"student_id": student_id, "competency_id": competency_id}
        if await self.store.get(Entity.COMPETENCY_VALIDATIONS, key) is None:
            return
        await self.store.delete(Entity.COMPETENCY_VALIDATIONS, key)

    async def submit_assignment(
        self, student_id: str, assignment_id: int, content: str
    ) -> SubmissionRecord:
        """Create the student's next attempt at an assignment.

        Raises:
            Forbidden: If the actor is not a student
            RecordNotFound: If the assignment does not exist
            NotEnrolled: If the student is not enrolled in its course
            AttemptLimitExceeded: If every allowed attempt is used
            StoreError: If a concurrent attempt claimed the same number
        """
        await self.require_role(student_id, "student")
        assignment = await self.require_assignment_access(student_id, assignment_id)

        existing: list[SubmissionRecord] = await self.store.fetch(
            Entity.SUBMISSIONS, {"assignment_id": assignment_id, "student_id": student_id}
        )
        check_attempt_admission(assignment, existing)

        (submission,) = await self.store.insert(
            Entity.SUBMISSIONS,
            [
                {
                    "assignment_id": assignment_id,
                    "student_id": student_id,
                    "attempt_number": next_attempt_number(existing),
                    "content": content,
                    "submitted_at": self.clock(),
                }
            ],
        )
        logger.info(
            f"Student {student_id} submitted attempt {submission.attempt_number} "
            f"for assignment {assignment_id}"
        )
        return submission
