"""
Integration Tests for the Dashboard Aggregator

End-to-end read side: seeded store -> screened records -> per-role views.
"""

import pytest

from eduportal.core.errors import NotEnrolled, RecordNotFound
from eduportal.core.schemas import (
    AdminDashboard,
    AssignmentStatus,
    StudentDashboard,
    TeacherDashboard,
)
from eduportal.progress import CourseContentManager, DashboardAggregator, EnrollmentGuard


@pytest.fixture
def aggregator(store) -> DashboardAggregator:
    return DashboardAggregator(store)


@pytest.fixture
def guard(store) -> EnrollmentGuard:
    return EnrollmentGuard(store)


# ============================================================================
# Student progress
# ============================================================================


class TestStudentProgress:
    async def test_progress_follows_validations_and_deletions(
        self, aggregator, guard, store, seed, teacher, student, course
    ):
        """Course with four competencies: 25% -> 75% -> one deleted -> 67%."""
        competencies = await seed.competencies(course.id, 4)
        await seed.enroll(student.id, course.id)

        await guard.validate_competency(student.id, competencies[0].id)
        progress = await aggregator.student_course_progress(student.id, course.id)
        assert progress.percentage == 25

        await guard.validate_competency(student.id, competencies[1].id)
        await guard.validate_competency(student.id, competencies[2].id)
        progress = await aggregator.student_course_progress(student.id, course.id)
        assert progress.percentage == 75

        await CourseContentManager(store).delete_competency(
            teacher.id, course.id, competencies[2].id
        )
        progress = await aggregator.student_course_progress(student.id, course.id)
        assert (progress.validated, progress.total, progress.percentage) == (2, 3, 67)

    async def test_course_without_competencies(self, aggregator, seed, student, course):
        await seed.enroll(student.id, course.id)

        progress = await aggregator.student_course_progress(student.id, course.id)

        assert progress.percentage == 0
        assert progress.total == 0

    async def test_requires_enrollment(self, aggregator, student, course):
        with pytest.raises(NotEnrolled):
            await aggregator.student_course_progress(student.id, course.id)


class TestStudentDashboard:
    async def test_courses_and_assignments(self, aggregator, seed, student, course):
        competencies = await seed.competencies(course.id, 2)
        homework = await seed.assignment(course.id, max_attempts=3)
        quiz = await seed.assignment(course.id, title="Quiz")
        await seed.enroll(student.id, course.id)
        await seed.validation(student.id, competencies[0].id)
        await seed.submission(homework.id, student.id, 1, score=77)

        dashboard = await aggregator.build(student.id)

        assert isinstance(dashboard, StudentDashboard)
        (course_view,) = dashboard.courses
        assert course_view.progress == 50
        assert [c.validated for c in course_view.competencies] == [True, False]

        statuses = {view.assignment.id: view for view in dashboard.assignments}
        assert statuses[homework.id].status == AssignmentStatus.GRADED
        assert statuses[homework.id].attempts_remaining == 2
        assert statuses[quiz.id].status == AssignmentStatus.PENDING
        assert statuses[quiz.id].attempts_remaining is None
        assert dashboard.integrity_warnings == []

    async def test_only_enrolled_courses(self, aggregator, seed, teacher, student, course):
        other = await seed.course(teacher.id, title="History")
        await seed.competencies(other.id, 3)
        await seed.enroll(student.id, course.id)

        dashboard = await aggregator.build(student.id)

        assert [view.course.id for view in dashboard.courses] == [course.id]

    async def test_orphans_reported_after_unenroll(
        self, aggregator, guard, seed, student, course
    ):
        (competency,) = await seed.competencies(course.id, 1)
        assignment = await seed.assignment(course.id)
        await seed.enroll(student.id, course.id)
        await seed.validation(student.id, competency.id)
        submission = await seed.submission(assignment.id, student.id)

        await guard.unenroll(course.id, student.id)
        dashboard = await aggregator.build(student.id)

        assert dashboard.courses == []
        assert dashboard.assignments == []
        assert dashboard.integrity_warnings == [
            f"competence_val[{student.id}:{competency.id}]: "
            f"student not enrolled in course {course.id}",
            f"submissions[{submission.id}]: student not enrolled in course {course.id}",
        ]

    async def test_assignment_status_view(self, aggregator, seed, student, course):
        assignment = await seed.assignment(course.id, max_attempts=2)
        await seed.enroll(student.id, course.id)
        await seed.submission(assignment.id, student.id, 1, score=40)
        await seed.submission(assignment.id, student.id, 2)

        view = await aggregator.student_assignment_status(student.id, assignment.id)

        assert view.status == AssignmentStatus.SUBMITTED
        assert view.latest_submission.attempt_number == 2
        assert view.attempts_used == 2
        assert view.attempts_remaining == 0


# ============================================================================
# Teacher and admin
# ============================================================================


class TestTeacherDashboard:
    async def test_students_progress_and_pending(self, aggregator, seed, teacher, course):
        competencies = await seed.competencies(course.id, 4)
        assignment = await seed.assignment(course.id)
        for student_id in ("s-1", "s-2"):
            await seed.user(student_id)
            await seed.enroll(student_id, course.id)
        await seed.validation("s-1", competencies[0].id)
        await seed.validation("s-2", competencies[0].id)
        await seed.validation("s-2", competencies[1].id)
        pending = await seed.submission(assignment.id, "s-1")
        await seed.submission(assignment.id, "s-2", score=95)

        dashboard = await aggregator.build(teacher.id)

        assert isinstance(dashboard, TeacherDashboard)
        (course_view,) = dashboard.courses
        assert course_view.competency_count == 4
        assert course_view.assignment_count == 1
        assert {s.student.id: s.progress for s in course_view.students} == {
            "s-1": 25,
            "s-2": 50,
        }
        # (25 + 50) / 2 = 37.5
        assert course_view.average_progress == 38
        assert [s.id for s in dashboard.pending_evaluations] == [pending.id]

    async def test_unenrolled_submission_not_pending(
        self, aggregator, guard, seed, teacher, student, course
    ):
        assignment = await seed.assignment(course.id)
        await seed.enroll(student.id, course.id)
        await seed.submission(assignment.id, student.id)

        await guard.unenroll(course.id, student.id)
        dashboard = await aggregator.build(teacher.id)

        assert dashboard.pending_evaluations == []
        assert len(dashboard.integrity_warnings) == 1
        assert dashboard.courses[0].students == []
        assert dashboard.courses[0].average_progress == 0


class TestAdminDashboard:
    async def test_statistics(self, aggregator, seed, teacher, student, course):
        admin = await seed.user("admin-efua", role="admin")
        assignment = await seed.assignment(course.id)
        await seed.enroll(student.id, course.id)
        await seed.submission(assignment.id, student.id)

        dashboard = await aggregator.build(admin.id)

        assert isinstance(dashboard, AdminDashboard)
        assert len(dashboard.users) == 3
        assert dashboard.statistics.users_by_role == {"student": 1, "teacher": 1, "admin": 1}
        assert dashboard.statistics.courses == 1
        assert dashboard.statistics.enrollments == 1
        assert dashboard.statistics.submissions == 1
        assert dashboard.statistics.pending_evaluations == 1


async def test_unknown_user(aggregator):
    with pytest.raises(RecordNotFound, match="users not found"):
        await aggregator.build("nobody")
