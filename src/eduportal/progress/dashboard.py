"""
Dashboard Aggregator

Composition root for the read side: loads the entities relevant to a user,
screens out orphaned records, and feeds the progress calculator and status
resolver to build the per-role view model. Every call reads fresh from the
store; nothing is cached between requests.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from eduportal.core.errors import IntegrityWarning, NotEnrolled, RecordNotFound
from eduportal.core.schemas.progress import (
    AdminDashboard,
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
from eduportal.core.schemas.records import UserRecord
from eduportal.progress.calculator import compute_course_progress, compute_progress
from eduportal.progress.enrollment import EnrollmentGuard, screen_submissions, screen_validations
from eduportal.progress.evaluation import select_pending
from eduportal.progress.status import attempts_remaining, is_late, resolve_status
from eduportal.store import Entity

if TYPE_CHECKING:
    from eduportal.core.schemas.records import (
        AssignmentRecord,
        CompetencyRecord,
        CompetencyValidationRecord,
        CourseRecord,
        EnrollmentRecord,
        SubmissionRecord,
    )
    from eduportal.store import RecordStore

logger = logging.getLogger(__name__)

DashboardView = StudentDashboard | TeacherDashboard | AdminDashboard


def _merge_by_id(*groups: Iterable[Any]) -> list[Any]:
    merged: dict[int, Any] = {}
    for group in groups:
        for record in group:
            merged[record.id] = record
    return list(merged.values())


def _average(values: Sequence[int]) -> int:
    """Mean of integer percentages, halves rounded up; 0 for no values."""
    if not values:
        return 0
    return (2 * sum(values) + len(values)) // (2 * len(values))


class DashboardAggregator:
    """Builds role-specific dashboards from a record store."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.guard = EnrollmentGuard(store)

    async def build(self, user_id: str) -> DashboardView:
        """Build the dashboard for the user's role.

        Raises:
            RecordNotFound: If the user does not exist
        """
        user: UserRecord | None = await self.store.get(Entity.USERS, user_id)
        if user is None:
            raise RecordNotFound(Entity.USERS, user_id)

        logger.debug(f"Building {user.role} dashboard for {user_id}")
        if user.role == "student":
            return await self.student_dashboard(user)
        if user.role == "teacher":
            return await self.teacher_dashboard(user)
        return await self.admin_dashboard(user)

    # ------------------------------------------------------------------
    # Student
    # ------------------------------------------------------------------

    async def student_dashboard(self, user: UserRecord) -> StudentDashboard:
        enrollments: list[EnrollmentRecord] = await self.store.fetch(
            Entity.ENROLLMENTS, {"student_id": user.id}
        )
        course_ids = [e.course_id for e in enrollments]
        courses: list[CourseRecord] = await self._fetch_in(Entity.COURSES, "id", course_ids)

        validations: list[CompetencyValidationRecord] = await self.store.fetch(
            Entity.COMPETENCY_VALIDATIONS, {"student_id": user.id}
        )
        submissions: list[SubmissionRecord] = await self.store.fetch(
            Entity.SUBMISSIONS, {"student_id": user.id}
        )

        # Include records referenced from outside the enrolled courses so the
        # screening can tell "not enrolled" apart from "missing".
        competencies: list[CompetencyRecord] = _merge_by_id(
            await self._fetch_in(Entity.COMPETENCIES, "course_id", course_ids),
            await self._fetch_in(
                Entity.COMPETENCIES, "id", [v.competency_id for v in validations]
            ),
        )
        assignments: list[AssignmentRecord] = _merge_by_id(
            await self._fetch_in(Entity.ASSIGNMENTS, "course_id", course_ids),
            await self._fetch_in(Entity.ASSIGNMENTS, "id", [s.assignment_id for s in submissions]),
        )

        validations, validation_warnings = screen_validations(
            validations, competencies, enrollments
        )
        submissions, submission_warnings = screen_submissions(
            submissions, assignments, enrollments
        )
        validated_ids = {v.competency_id for v in validations}

        course_views = []
        for course in courses:
            course_competencies = [c for c in competencies if c.course_id == course.id]
            course_views.append(
                CourseProgressView(
                    course=course,
                    progress=compute_progress(course_competencies, validations),
                    competencies=[
                        CompetencyView(competency=c, validated=c.id in validated_ids)
                        for c in course_competencies
                    ],
                )
            )

        enrolled_course_ids = set(course_ids)
        assignment_views = [
            self._assignment_view(assignment, submissions)
            for assignment in assignments
            if assignment.course_id in enrolled_course_ids
        ]

        return StudentDashboard(
            user=user,
            courses=course_views,
            assignments=assignment_views,
            integrity_warnings=self._describe(validation_warnings + submission_warnings),
        )

    async def student_course_progress(self, student_id: str, course_id: int) -> CourseProgress:
        """Progress of one student in one course.

        Raises:
            NotEnrolled: If the student is not enrolled in the course
        """
        if not await self.guard.is_enrolled(student_id, course_id):
            raise NotEnrolled(student_id, course_id)

        competencies = await self.store.fetch(Entity.COMPETENCIES, {"course_id": course_id})
        validations = []
        if competencies:
            validations = await self.store.fetch(
                Entity.COMPETENCY_VALIDATIONS,
                {"student_id": student_id, "competency_id": [c.id for c in competencies]},
            )
        return compute_course_progress(student_id, course_id, competencies, validations)

    async def student_assignment_status(
        self, student_id: str, assignment_id: int
    ) -> AssignmentStatusView:
        """Status of one assignment for one student.

        Raises:
            RecordNotFound: If the assignment does not exist
            NotEnrolled: If the student is not enrolled in its course
        """
        assignment = await self.guard.require_assignment_access(student_id, assignment_id)
        submissions = await self.store.fetch(
            Entity.SUBMISSIONS, {"assignment_id": assignment_id, "student_id": student_id}
        )
        return self._assignment_view(assignment, submissions)

    # ------------------------------------------------------------------
    # Teacher
    # ------------------------------------------------------------------

    async def teacher_dashboard(self, user: UserRecord) -> TeacherDashboard:
        links = await self.store.fetch(Entity.COURSE_TEACHERS, {"teacher_id": user.id})
        course_ids = [link.course_id for link in links]

        courses: list[CourseRecord] = await self._fetch_in(Entity.COURSES, "id", course_ids)
        competencies: list[CompetencyRecord] = await self._fetch_in(
            Entity.COMPETENCIES, "course_id", course_ids
        )
        assignments: list[AssignmentRecord] = await self._fetch_in(
            Entity.ASSIGNMENTS, "course_id", course_ids
        )
        enrollments: list[EnrollmentRecord] = await self._fetch_in(
            Entity.ENROLLMENTS, "course_id", course_ids
        )
        students: list[UserRecord] = await self._fetch_in(
            Entity.USERS, "id", sorted({e.student_id for e in enrollments})
        )
        validations: list[CompetencyValidationRecord] = await self._fetch_in(
            Entity.COMPETENCY_VALIDATIONS, "competency_id", [c.id for c in competencies]
        )
        submissions: list[SubmissionRecord] = await self._fetch_in(
            Entity.SUBMISSIONS, "assignment_id", [a.id for a in assignments]
        )

        validations, validation_warnings = screen_validations(
            validations, competencies, enrollments
        )
        pending, submission_warnings = select_pending(submissions, assignments, enrollments)

        students_by_id = {s.id: s for s in students}
        course_views = []
        for course in courses:
            course_competencies = [c for c in competencies if c.course_id == course.id]
            student_views = []
            for enrollment in enrollments:
                student = students_by_id.get(enrollment.student_id)
                if enrollment.course_id != course.id or student is None:
                    continue
                progress = compute_progress(
                    course_competencies,
                    [v for v in validations if v.student_id == student.id],
                )
                student_views.append(StudentProgressView(student=student, progress=progress))

            course_views.append(
                TeacherCourseView(
                    course=course,
                    competency_count=len(course_competencies),
                    assignment_count=sum(1 for a in assignments if a.course_id == course.id),
                    students=student_views,
                    average_progress=_average([s.progress for s in student_views]),
                )
            )

        return TeacherDashboard(
            user=user,
            courses=course_views,
            pending_evaluations=pending,
            integrity_warnings=self._describe(validation_warnings + submission_warnings),
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def admin_dashboard(self, user: UserRecord) -> AdminDashboard:
        users: list[UserRecord] = await self.store.fetch(Entity.USERS)
        by_role = Counter(u.role for u in users)

        statistics = SystemStatistics(
            users_by_role={role: by_role.get(role, 0) for role in ("student", "teacher", "admin")},
            courses=await self.store.count(Entity.COURSES),
            enrollments=await self.store.count(Entity.ENROLLMENTS),
            submissions=await self.store.count(Entity.SUBMISSIONS),
            pending_evaluations=await self.store.count(Entity.SUBMISSIONS, {"score": None}),
        )
        return AdminDashboard(user=user, users=users, statistics=statistics)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fetch_in(self, entity: Entity, column: str, values: Sequence[Any]) -> list[Any]:
        """Fetch rows whose column is in `values`; no query for an empty list."""
        if not values:
            return []
        return await self.store.fetch(entity, {column: list(values)})

    @staticmethod
    def _assignment_view(
        assignment: AssignmentRecord, submissions: Iterable[SubmissionRecord]
    ) -> AssignmentStatusView:
        own = [s for s in submissions if s.assignment_id == assignment.id]
        resolution = resolve_status(assignment, own)
        return AssignmentStatusView(
            assignment=assignment,
            status=resolution.status,
            latest_submission=resolution.latest_submission,
            attempts_used=len(own),
            attempts_remaining=attempts_remaining(assignment, len(own)),
            is_late=is_late(assignment, resolution.latest_submission),
        )

    @staticmethod
    def _describe(warnings: list[IntegrityWarning]) -> list[str]:
        return [str(w) for w in warnings]
