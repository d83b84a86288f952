"""
Record Store Contract

The narrow read/write contract the core uses to reach the backing datastore.
Implementations are passed in explicitly (one per request or test); nothing
in the core holds a global client.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Any, Protocol

from eduportal.core.schemas.records import Record

# Scalar id, composite tuple in primary-key column order, or {column: value}
RecordKey = int | str | tuple[Any, ...] | Mapping[str, Any]

# {column: value}; a list/tuple/set value means "column IN (...)", None means IS NULL
Filters = Mapping[str, Any]


class Entity(StrEnum):
    """Store entities, named after their backing tables."""

    USERS = "users"
    COURSES = "courses"
    COURSE_TEACHERS = "course_teachers"
    ENROLLMENTS = "enrollments"
    COMPETENCIES = "competence"
    COMPETENCY_VALIDATIONS = "competence_val"
    ASSIGNMENTS = "assignments"
    SUBMISSIONS = "submissions"
    COURSE_ATTACHMENTS = "course_attachments"


class RecordStore(Protocol):
    """Entity-oriented CRUD contract. Every method may raise StoreError."""

    async def fetch(self, entity: Entity, filters: Filters | None = None) -> list[Any]:
        """Return every row of `entity` matching all filters."""
        ...

    async def get(self, entity: Entity, key: RecordKey) -> Any | None:
        """Return one row by primary key, or None."""
        ...

    async def count(self, entity: Entity, filters: Filters | None = None) -> int:
        """Count rows of `entity` matching all filters."""
        ...

    async def insert(self, entity: Entity, rows: Sequence[Mapping[str, Any]]) -> list[Any]:
        """Insert all rows in one transaction (all-or-nothing)."""
        ...

    async def update(self, entity: Entity, key: RecordKey, patch: Mapping[str, Any]) -> Any:
        """Merge `patch` into one row and return the updated row."""
        ...

    async def delete(self, entity: Entity, key: RecordKey) -> None:
        """Delete one row by primary key."""
        ...


__all__ = ["Entity", "Filters", "Record", "RecordKey", "RecordStore"]
