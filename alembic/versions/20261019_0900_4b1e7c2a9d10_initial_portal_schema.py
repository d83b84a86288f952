"""Initial portal schema

Revision ID: 4b1e7c2a9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b1e7c2a9d10"  # pragma: allowlist secret
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("role", sa.String(10), nullable=False),
        _created_at(),
        sa.CheckConstraint("role IN ('student', 'teacher', 'admin')", name="check_user_role"),
    )
    op.create_index("idx_users_role", "users", ["role"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "course_teachers",
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "teacher_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _created_at(),
    )
    op.create_index("idx_course_teachers_teacher", "course_teachers", ["teacher_id"])

    op.create_table(
        "enrollments",
        sa.Column(
            "student_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _created_at(),
    )
    op.create_index("idx_enrollments_course", "enrollments", ["course_id"])

    op.create_table(
        "course_attachments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("file_url", sa.String(1000), nullable=False),
        _created_at(),
    )
    op.create_index("idx_course_attachments_course", "course_attachments", ["course_id"])

    op.create_table(
        "competence",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("idx_competence_course", "competence", ["course_id"])

    op.create_table(
        "competence_val",
        sa.Column(
            "student_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "competency_id",
            sa.Integer,
            sa.ForeignKey("competence.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "validated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("idx_competence_val_competency", "competence_val", ["competency_id"])

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_attempts", sa.SmallInteger, nullable=True),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "max_attempts IS NULL OR max_attempts >= 1", name="check_assignment_max_attempts"
        ),
    )
    op.create_index("idx_assignments_course", "assignments", ["course_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "assignment_id",
            sa.Integer,
            sa.ForeignKey("assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "student_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attempt_number", sa.Integer, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("score", sa.Float, nullable=True),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("evaluated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "graded_by",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "assignment_id", "student_id", "attempt_number", name="uq_submission_attempt"
        ),
        sa.CheckConstraint("attempt_number >= 1", name="check_submission_attempt_number"),
        sa.CheckConstraint(
            "score IS NULL OR (score >= 0 AND score <= 100)", name="check_submission_score"
        ),
    )
    op.create_index("idx_submissions_student", "submissions", ["student_id"])


def downgrade() -> None:
    # Reverse dependency order
    for table in (
        "submissions",
        "assignments",
        "competence_val",
        "competence",
        "course_attachments",
        "enrollments",
        "course_teachers",
        "courses",
        "users",
    ):
        op.drop_table(table)
