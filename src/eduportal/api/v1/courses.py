"""
Course API Endpoints

Teacher-side course content and enrollment management.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from eduportal.api.deps import get_current_user_id, get_store
from eduportal.core.schemas import (
    AssignmentCreate,
    AssignmentRecord,
    AssignmentUpdate,
    CompetencyCreate,
    CompetencyRecord,
    CompetencyUpdate,
    CourseAttachmentRecord,
    CourseCreate,
    CourseRecord,
    EnrollmentRequest,
    EnrollmentResult,
    MaterialCreate,
    MaterialUpdate,
    UserRecord,
)
from eduportal.progress import CourseContentManager, EnrollmentGuard
from eduportal.store import RecordStore

router = APIRouter()


class CourseContentSchema(BaseModel):
    """Course with its competencies, assignments, materials and students."""

    course: CourseRecord
    competencies: list[CompetencyRecord]
    assignments: list[AssignmentRecord]
    materials: list[CourseAttachmentRecord]
    students: list[UserRecord]


# ============================================================================
# Courses
# ============================================================================


@router.post("/", response_model=CourseRecord, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CourseRecord:
    """Create a course taught by the acting teacher."""
    return await CourseContentManager(store).create_course(user_id, course_data)


@router.get("/{course_id}", response_model=CourseContentSchema)
async def get_course_content(
    course_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CourseContentSchema:
    """Course content, visible to its teachers and enrolled students."""
    guard = EnrollmentGuard(store)
    if not await guard.is_enrolled(user_id, course_id):
        await guard.require_course_teacher(course_id, user_id)

    content = await CourseContentManager(store).course_content(course_id)
    return CourseContentSchema(
        course=content.course,
        competencies=content.competencies,
        assignments=content.assignments,
        materials=content.materials,
        students=content.students,
    )


# ============================================================================
# Competencies
# ============================================================================


@router.post(
    "/{course_id}/competencies",
    response_model=CompetencyRecord,
    status_code=status.HTTP_201_CREATED,
)
async def add_competency(
    course_id: int,
    competency_data: CompetencyCreate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CompetencyRecord:
    return await CourseContentManager(store).add_competency(user_id, course_id, competency_data)


@router.put("/{course_id}/competencies/{competency_id}", response_model=CompetencyRecord)
async def update_competency(
    course_id: int,
    competency_id: int,
    competency_update: CompetencyUpdate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CompetencyRecord:
    """Update a competency. Only updates fields that are explicitly provided."""
    return await CourseContentManager(store).update_competency(
        user_id, course_id, competency_id, competency_update
    )


@router.delete(
    "/{course_id}/competencies/{competency_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_competency(
    course_id: int,
    competency_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> None:
    await CourseContentManager(store).delete_competency(user_id, course_id, competency_id)


# ============================================================================
# Assignments
# ============================================================================


@router.post(
    "/{course_id}/assignments",
    response_model=AssignmentRecord,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    course_id: int,
    assignment_data: AssignmentCreate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> AssignmentRecord:
    return await CourseContentManager(store).create_assignment(
        user_id, course_id, assignment_data
    )


@router.put("/{course_id}/assignments/{assignment_id}", response_model=AssignmentRecord)
async def update_assignment(
    course_id: int,
    assignment_id: int,
    assignment_update: AssignmentUpdate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> AssignmentRecord:
    return await CourseContentManager(store).update_assignment(
        user_id, course_id, assignment_id, assignment_update
    )


# ============================================================================
# Materials
# ============================================================================


@router.post(
    "/{course_id}/materials",
    response_model=CourseAttachmentRecord,
    status_code=status.HTTP_201_CREATED,
)
async def add_material(
    course_id: int,
    material_data: MaterialCreate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CourseAttachmentRecord:
    """Attach an already-uploaded file to the course."""
    return await CourseContentManager(store).add_material(user_id, course_id, material_data)


@router.put("/{course_id}/materials/{material_id}", response_model=CourseAttachmentRecord)
async def update_material(
    course_id: int,
    material_id: int,
    material_update: MaterialUpdate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CourseAttachmentRecord:
    return await CourseContentManager(store).update_material(
        user_id, course_id, material_id, material_update
    )


@router.delete("/{course_id}/materials/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_material(
    course_id: int,
    material_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> None:
    await CourseContentManager(store).delete_material(user_id, course_id, material_id)


# ============================================================================
# Enrollments
# ============================================================================


@router.post("/{course_id}/enrollments", response_model=list[EnrollmentResult])
async def enroll_students(
    course_id: int,
    enrollment_data: EnrollmentRequest,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> list[EnrollmentResult]:
    """Enroll a batch of students. Already-enrolled students are skipped."""
    guard = EnrollmentGuard(store)
    await guard.require_course_teacher(course_id, user_id)
    return await guard.enroll(course_id, enrollment_data.student_ids)


@router.delete(
    "/{course_id}/enrollments/{student_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def unenroll_student(
    course_id: int,
    student_id: str,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> None:
    guard = EnrollmentGuard(store)
    await guard.require_course_teacher(course_id, user_id)
    await guard.unenroll(course_id, student_id)
