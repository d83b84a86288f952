"""
Course Content Management

Teacher-side mutations of course content: courses, competencies, assignments
and material metadata. A teacher may only change courses they teach.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from eduportal.core.errors import RecordNotFound, ValidationError
from eduportal.progress.enrollment import EnrollmentGuard
from eduportal.store import Entity

if TYPE_CHECKING:
    from eduportal.core.schemas.courses import (
        AssignmentCreate,
        AssignmentUpdate,
        CompetencyCreate,
        CompetencyUpdate,
        CourseCreate,
        MaterialCreate,
        MaterialUpdate,
    )
    from eduportal.core.schemas.records import (
        AssignmentRecord,
        CompetencyRecord,
        CourseAttachmentRecord,
        CourseRecord,
        UserRecord,
    )
    from eduportal.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class CourseContent:
    """Everything attached to one course, freshly read from the store."""

    course: CourseRecord
    competencies: list[CompetencyRecord]
    assignments: list[AssignmentRecord]
    materials: list[CourseAttachmentRecord]
    students: list[UserRecord]


class CourseContentManager:
    """Creates and edits course content on behalf of a teacher."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.guard = EnrollmentGuard(store)

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------

    async def create_course(self, teacher_id: str, data: CourseCreate) -> CourseRecord:
        """Create a course and link its creator as teacher."""
        await self.guard.require_role(teacher_id, "teacher")

        (course,) = await self.store.insert(Entity.COURSES, [data.model_dump()])
        await self.store.insert(
            Entity.COURSE_TEACHERS, [{"course_id": course.id, "teacher_id": teacher_id}]
        )
        logger.info(f"Teacher {teacher_id} created course {course.id}")
        return course

    async def course_content(self, course_id: int) -> CourseContent:
        course: CourseRecord | None = await self.store.get(Entity.COURSES, course_id)
        if course is None:
            raise RecordNotFound(Entity.COURSES, course_id)

        enrollments = await self.store.fetch(Entity.ENROLLMENTS, {"course_id": course_id})
        student_ids = [e.student_id for e in enrollments]
        students = (
            await self.store.fetch(Entity.USERS, {"id": student_ids}) if student_ids else []
        )

        return CourseContent(
            course=course,
            competencies=await self.store.fetch(Entity.COMPETENCIES, {"course_id": course_id}),
            assignments=await self.store.fetch(Entity.ASSIGNMENTS, {"course_id": course_id}),
            materials=await self.store.fetch(
                Entity.COURSE_ATTACHMENTS, {"course_id": course_id}
            ),
            students=students,
        )

    # ------------------------------------------------------------------
    # Competencies
    # ------------------------------------------------------------------

    async def add_competency(
        self, teacher_id: str, course_id: int, data: CompetencyCreate
    ) -> CompetencyRecord:
        await self.guard.require_course_teacher(course_id, teacher_id)
        (competency,) = await self.store.insert(
            Entity.COMPETENCIES, [{"course_id": course_id, **data.model_dump()}]
        )
        return competency

    async def update_competency(
        self, teacher_id: str, course_id: int, competency_id: int, data: CompetencyUpdate
    ) -> CompetencyRecord:
        await self.guard.require_course_teacher(course_id, teacher_id)
        await self._require_in_course(Entity.COMPETENCIES, competency_id, course_id)
        return await self.store.update(
            Entity.COMPETENCIES, competency_id, self._changes(data)
        )

    async def delete_competency(self, teacher_id: str, course_id: int, competency_id: int) -> None:
        """Delete a competency.

        Validations pointing at it stop counting towards progress immediately,
        whether or not the backend removed them.
        """
        await self.guard.require_course_teacher(course_id, teacher_id)
        await self._require_in_course(Entity.COMPETENCIES, competency_id, course_id)
        await self.store.delete(Entity.COMPETENCIES, competency_id)
        logger.info(f"Teacher {teacher_id} deleted competency {competency_id}")

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    async def create_assignment(
        self, teacher_id: str, course_id: int, data: AssignmentCreate
    ) -> AssignmentRecord:
        await self.guard.require_course_teacher(course_id, teacher_id)
        (assignment,) = await self.store.insert(
            Entity.ASSIGNMENTS, [{"course_id": course_id, **data.model_dump()}]
        )
        return assignment

    async def update_assignment(
        self, teacher_id: str, course_id: int, assignment_id: int, data: AssignmentUpdate
    ) -> AssignmentRecord:
        """Update an assignment; the resulting window must stay ordered."""
        await self.guard.require_course_teacher(course_id, teacher_id)
        current = await self._require_in_course(Entity.ASSIGNMENTS, assignment_id, course_id)

        changes = self._changes(data)
        start = changes.get("start_date", current.start_date)
        end = changes.get("end_date", current.end_date)
        if start and end and end < start:
            raise ValidationError("end_date must not be before start_date")

        return await self.store.update(Entity.ASSIGNMENTS, assignment_id, changes)

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    async def add_material(
        self, teacher_id: str, course_id: int, data: MaterialCreate
    ) -> CourseAttachmentRecord:
        await self.guard.require_course_teacher(course_id, teacher_id)
        (material,) = await self.store.insert(
            Entity.COURSE_ATTACHMENTS, [{"course_id": course_id, **data.model_dump()}]
        )
        return material

    async def update_material(
        self, teacher_id: str, course_id: int, material_id: int, data: MaterialUpdate
    ) -> CourseAttachmentRecord:
        await self.guard.require_course_teacher(course_id, teacher_id)
        await self._require_in_course(Entity.COURSE_ATTACHMENTS, material_id, course_id)
        return await self.store.update(
            Entity.COURSE_ATTACHMENTS, material_id, self._changes(data)
        )

    async def delete_material(self, teacher_id: str, course_id: int, material_id: int) -> None:
        await self.guard.require_course_teacher(course_id, teacher_id)
        await self._require_in_course(Entity.COURSE_ATTACHMENTS, material_id, course_id)
        await self.store.delete(Entity.COURSE_ATTACHMENTS, material_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_in_course(self, entity: Entity, record_id: int, course_id: int) -> Any:
        """Fetch a course-owned record, treating another course's record as missing."""
        record = await self.store.get(entity, record_id)
        if record is None or record.course_id != course_id:
            raise RecordNotFound(entity, record_id)
        return record

    @staticmethod
    def _changes(data: CompetencyUpdate | AssignmentUpdate | MaterialUpdate) -> dict[str, Any]:
        """Only the fields the caller provided; required columns cannot be nulled."""
        changes = data.model_dump(exclude_unset=True)
        for required in ("title", "type", "file_url"):
            if required in changes and changes[required] is None:
                raise ValidationError(f"{required} cannot be null")
        if not changes:
            raise ValidationError("No fields to update")
        return changes
