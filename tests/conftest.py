"""
Pytest Configuration and Fixtures

Shared test fixtures for unit, integration and API tests. Tests run against a
fresh in-memory SQLite database per test.
"""

import os

# Must be set before eduportal.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import Sequence  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import configure_mappers  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from eduportal.core.models import Base  # noqa: E402
from eduportal.core.schemas import (  # noqa: E402
    AssignmentRecord,
    CompetencyRecord,
    CompetencyValidationRecord,
    EnrollmentRecord,
    SubmissionRecord,
)
from eduportal.store import Entity, SQLAlchemyRecordStore  # noqa: E402

# Ensure all mappers are configured
configure_mappers()

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
async def async_engine():
    """Create an in-memory engine with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool, echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncSession:
    """Create database session for testing."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def store(db_session: AsyncSession) -> SQLAlchemyRecordStore:
    """Record store bound to the test session."""
    return SQLAlchemyRecordStore(db_session)


# ============================================================================
# Seeding helpers (write through the store, like production code)
# ============================================================================


class Seeder:
    """Inserts portal rows for tests."""

    def __init__(self, store: SQLAlchemyRecordStore):
        self.store = store

    async def user(self, user_id: str, role: str = "student") -> Any:
        (user,) = await self.store.insert(
            Entity.USERS,
            [
                {
                    "id": user_id,
                    "email": f"{user_id}@school.test",
                    "full_name": user_id.replace("-", " ").title(),
                    "role": role,
                }
            ],
        )
        return user

    async def course(self, teacher_id: str, title: str = "Algebra I") -> Any:
        (course,) = await self.store.insert(Entity.COURSES, [{"title": title}])
        await self.store.insert(
            Entity.COURSE_TEACHERS, [{"course_id": course.id, "teacher_id": teacher_id}]
        )
        return course

    async def competencies(self, course_id: int, count: int) -> list[Any]:
        return await self.store.insert(
            Entity.COMPETENCIES,
            [{"course_id": course_id, "title": f"Skill {n}"} for n in range(1, count + 1)],
        )

    async def assignment(self, course_id: int, **fields: Any) -> Any:
        row = {"course_id": course_id, "title": "Homework 1", "type": "homework", **fields}
        (assignment,) = await self.store.insert(Entity.ASSIGNMENTS, [row])
        return assignment

    async def enroll(self, student_id: str, course_id: int) -> Any:
        (enrollment,) = await self.store.insert(
            Entity.ENROLLMENTS, [{"student_id": student_id, "course_id": course_id}]
        )
        return enrollment

    async def validation(self, student_id: str, competency_id: int) -> Any:
        (validation,) = await self.store.insert(
            Entity.COMPETENCY_VALIDATIONS,
            [{"student_id": student_id, "competency_id": competency_id}],
        )
        return validation

    async def submission(
        self, assignment_id: int, student_id: str, attempt_number: int = 1, **fields: Any
    ) -> Any:
        row = {
            "assignment_id": assignment_id,
            "student_id": student_id,
            "attempt_number": attempt_number,
            "content": f"Attempt {attempt_number}",
            "submitted_at": BASE_TIME,
            **fields,
        }
        (submission,) = await self.store.insert(Entity.SUBMISSIONS, [row])
        return submission


@pytest.fixture
def seed(store: SQLAlchemyRecordStore) -> Seeder:
    return Seeder(store)


@pytest.fixture
async def teacher(seed: Seeder) -> Any:
    return await seed.user("teacher-ada", role="teacher")


@pytest.fixture
async def student(seed: Seeder) -> Any:
    return await seed.user("student-kofi", role="student")


@pytest.fixture
async def course(seed: Seeder, teacher: Any) -> Any:
    return await seed.course(teacher.id)


# ============================================================================
# In-memory record builders for pure-function tests
# ============================================================================


class RecordFactory:
    """Builds typed records without touching a database."""

    def competency(self, competency_id: int, course_id: int = 1) -> CompetencyRecord:
        return CompetencyRecord(
            id=competency_id,
            course_id=course_id,
            title=f"Skill {competency_id}",
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )

    def competencies(self, ids: Sequence[int], course_id: int = 1) -> list[CompetencyRecord]:
        return [self.competency(i, course_id) for i in ids]

    def validation(
        self, competency_id: int, student_id: str = "student-kofi"
    ) -> CompetencyValidationRecord:
        return CompetencyValidationRecord(
            student_id=student_id, competency_id=competency_id, validated_at=BASE_TIME
        )

    def validations(
        self, ids: Sequence[int], student_id: str = "student-kofi"
    ) -> list[CompetencyValidationRecord]:
        return [self.validation(i, student_id) for i in ids]

    def enrollment(self, course_id: int, student_id: str = "student-kofi") -> EnrollmentRecord:
        return EnrollmentRecord(student_id=student_id, course_id=course_id, created_at=BASE_TIME)

    def assignment(
        self,
        assignment_id: int = 1,
        course_id: int = 1,
        max_attempts: int | None = None,
        end_date: datetime | None = None,
    ) -> AssignmentRecord:
        return AssignmentRecord(
            id=assignment_id,
            course_id=course_id,
            title=f"Assignment {assignment_id}",
            type="homework",
            end_date=end_date,
            max_attempts=max_attempts,
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )

    def submission(
        self,
        submission_id: int,
        attempt_number: int = 1,
        assignment_id: int = 1,
        student_id: str = "student-kofi",
        score: float | None = None,
        feedback: str | None = None,
        submitted_at: datetime | None = BASE_TIME,
        created_offset_minutes: int = 0,
    ) -> SubmissionRecord:
        return SubmissionRecord(
            id=submission_id,
            assignment_id=assignment_id,
            student_id=student_id,
            attempt_number=attempt_number,
            content="answer",
            submitted_at=submitted_at,
            score=score,
            feedback=feedback,
            created_at=BASE_TIME + timedelta(minutes=created_offset_minutes),
        )


@pytest.fixture
def records() -> RecordFactory:
    return RecordFactory()
