"""
Unit Tests for Database Models

Table layout, timestamps and constraints.
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.models import (
    Assignment,
    Base,
    Competency,
    CompetencyValidation,
    Course,
    Submission,
    User,
)


class TestTableLayout:
    def test_legacy_table_names(self):
        assert Competency.__tablename__ == "competence"
        assert CompetencyValidation.__tablename__ == "competence_val"

    def test_all_tables_registered(self):
        assert set(Base.metadata.tables) == {
            "users",
            "courses",
            "course_teachers",
            "enrollments",
            "course_attachments",
            "competence",
            "competence_val",
            "assignments",
            "submissions",
        }

    def test_composite_keys(self):
        enrollment_pk = [c.name for c in Base.metadata.tables["enrollments"].primary_key]
        validation_pk = [c.name for c in CompetencyValidation.__table__.primary_key]

        assert enrollment_pk == ["student_id", "course_id"]
        assert validation_pk == ["student_id", "competency_id"]


class TestTimestamps:
    def test_init_sets_timestamps(self):
        course = Course(title="Geometry")

        assert course.created_at is not None
        assert course.updated_at == course.created_at
        assert course.created_at.tzinfo is not None

    def test_user_has_no_updated_at(self):
        user = User(id="u-1", email="u1@school.test", role="student")

        assert user.created_at is not None
        assert not hasattr(user, "updated_at")


class TestConstraints:
    async def test_invalid_role_rejected(self, db_session: AsyncSession):
        db_session.add(User(id="u-1", email="u1@school.test", role="parent"))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

    async def test_max_attempts_must_be_positive(self, db_session: AsyncSession):
        course = Course(title="Geometry")
        db_session.add(course)
        await db_session.commit()

        db_session.add(Assignment(course_id=course.id, title="Quiz", max_attempts=0))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

    async def test_attempt_numbers_unique_per_student(self, db_session: AsyncSession):
        db_session.add(User(id="s-1", email="s1@school.test", role="student"))
        course = Course(title="Geometry")
        db_session.add(course)
        await db_session.commit()
        assignment = Assignment(course_id=course.id, title="Quiz")
        db_session.add(assignment)
        await db_session.commit()

        db_session.add_all(
            [
                Submission(assignment_id=assignment.id, student_id="s-1", attempt_number=1),
                Submission(assignment_id=assignment.id, student_id="s-1", attempt_number=1),
            ]
        )
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()
