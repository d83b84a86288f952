"""
SQLAlchemy Record Store

RecordStore implementation over a single AsyncSession. Maps ORM rows to typed
records at this boundary so schema drift stays out of the core.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from eduportal.core.errors import RecordNotFound, StoreError
from eduportal.core.models import (
    Assignment,
    Base,
    Competency,
    CompetencyValidation,
    Course,
    CourseAttachment,
    CourseTeacher,
    Enrollment,
    Submission,
    User,
)
from eduportal.core.schemas.records import (
    AssignmentRecord,
    CompetencyRecord,
    CompetencyValidationRecord,
    CourseAttachmentRecord,
    CourseRecord,
    CourseTeacherRecord,
    EnrollmentRecord,
    Record,
    SubmissionRecord,
    UserRecord,
)

from .base import Entity, Filters, RecordKey

logger = logging.getLogger(__name__)

ENTITY_MAP: dict[Entity, tuple[type[Base], type[Record]]] = {
    Entity.USERS: (User, UserRecord),
    Entity.COURSES: (Course, CourseRecord),
    Entity.COURSE_TEACHERS: (CourseTeacher, CourseTeacherRecord),
    Entity.ENROLLMENTS: (Enrollment, EnrollmentRecord),
    Entity.COMPETENCIES: (Competency, CompetencyRecord),
    Entity.COMPETENCY_VALIDATIONS: (CompetencyValidation, CompetencyValidationRecord),
    Entity.ASSIGNMENTS: (Assignment, AssignmentRecord),
    Entity.SUBMISSIONS: (Submission, SubmissionRecord),
    Entity.COURSE_ATTACHMENTS: (CourseAttachment, CourseAttachmentRecord),
}


class SQLAlchemyRecordStore:
    """Record store backed by a request-scoped AsyncSession.

    Each write method commits its own transaction. Failures roll back and are
    re-raised as StoreError; nothing is retried.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch(self, entity: Entity, filters: Filters | None = None) -> list[Any]:
        model, record = ENTITY_MAP[entity]
        stmt = (
            select(model)
            .where(*self._where(model, filters))
            .order_by(*model.__table__.primary_key.columns)
        )
        try:
            result = await self.db.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise await self._fail(f"fetch {entity}", e) from e
        return [record.model_validate(row) for row in rows]

    async def get(self, entity: Entity, key: RecordKey) -> Any | None:
        model, record = ENTITY_MAP[entity]
        try:
            row = await self.db.get(model, self._identity(key))
        except SQLAlchemyError as e:
            raise await self._fail(f"get {entity}", e) from e
        return record.model_validate(row) if row is not None else None

    async def count(self, entity: Entity, filters: Filters | None = None) -> int:
        model, _ = ENTITY_MAP[entity]
        stmt = select(func.count()).select_from(model).where(*self._where(model, filters))
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._fail(f"count {entity}", e) from e
        return int(result.scalar_one())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, entity: Entity, rows: Sequence[Mapping[str, Any]]) -> list[Any]:
        model, record = ENTITY_MAP[entity]
        if not rows:
            return []

        objects = []
        for row in rows:
            self._check_columns(model, row.keys())
            objects.append(model(**row))

        try:
            self.db.add_all(objects)
            await self.db.commit()
            for obj in objects:
                await self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise await self._fail(f"insert {len(objects)} row(s) into {entity}", e) from e

        return [record.model_validate(obj) for obj in objects]

    async def update(self, entity: Entity, key: RecordKey, patch: Mapping[str, Any]) -> Any:
        model, record = ENTITY_MAP[entity]
        self._check_columns(model, patch.keys())
        primary_keys = {column.name for column in model.__table__.primary_key.columns}
        if primary_keys & set(patch):
            raise ValueError(f"Cannot change primary key of {entity}")

        try:
            obj = await self.db.get(model, self._identity(key))
            if obj is None:
                raise RecordNotFound(entity, key)
            for field, value in patch.items():
                setattr(obj, field, value)
            await self.db.commit()
            await self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise await self._fail(f"update {entity}", e) from e

        return record.model_validate(obj)

    async def delete(self, entity: Entity, key: RecordKey) -> None:
        model, _ = ENTITY_MAP[entity]
        try:
            obj = await self.db.get(model, self._identity(key))
            if obj is None:
                raise RecordNotFound(entity, key)
            await self.db.delete(obj)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail(f"delete {entity}", e) from e

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fail(self, action: str, error: SQLAlchemyError) -> StoreError:
        """Roll back the session and build the StoreError to raise."""
        await self.db.rollback()
        logger.error(f"Record store failed to {action}: {error}")
        return StoreError(f"Failed to {action}: {error.__class__.__name__}")

    @staticmethod
    def _identity(key: RecordKey) -> Any:
        if isinstance(key, Mapping):
            return dict(key)
        return key

    @staticmethod
    def _check_columns(model: type[Base], names: Any) -> None:
        unknown = set(names) - set(model.__table__.columns.keys())
        if unknown:
            raise ValueError(f"Unknown column(s) for {model.__tablename__}: {sorted(unknown)}")

    @classmethod
    def _where(cls, model: type[Base], filters: Filters | None) -> list[ColumnElement[bool]]:
        if not filters:
            return []
        cls._check_columns(model, filters.keys())

        clauses = []
        for name, value in filters.items():
            column = model.__table__.columns[name]
            if value is None:
                clauses.append(column.is_(None))
            elif isinstance(value, list | tuple | set | frozenset):
                clauses.append(column.in_(list(value)))
            else:
                clauses.append(column == value)
        return clauses
