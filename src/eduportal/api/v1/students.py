"""
Student API Endpoints

Actions a student takes on their own records: competency self-validation,
assignment submission, and reading their own progress.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, status

from eduportal.api.deps import get_current_user_id, get_store
from eduportal.core.schemas import (
    AssignmentStatusView,
    CompetencyValidationRecord,
    CourseProgress,
    SubmissionCreate,
    SubmissionRecord,
)
from eduportal.progress import DashboardAggregator, EnrollmentGuard
from eduportal.store import RecordStore

router = APIRouter()


@router.put("/me/competencies/{competency_id}", response_model=CompetencyValidationRecord)
async def validate_competency(
    competency_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CompetencyValidationRecord:
    """Mark a competency as mastered. Repeating the call is harmless."""
    return await EnrollmentGuard(store).validate_competency(user_id, competency_id)


@router.delete("/me/competencies/{competency_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unvalidate_competency(
    competency_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> None:
    """Withdraw a competency validation."""
    await EnrollmentGuard(store).unvalidate_competency(user_id, competency_id)


@router.post(
    "/me/assignments/{assignment_id}/submissions",
    response_model=SubmissionRecord,
    status_code=status.HTTP_201_CREATED,
)
async def submit_assignment(
    assignment_id: int,
    submission_data: SubmissionCreate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> SubmissionRecord:
    """Submit the next attempt at an assignment."""
    return await EnrollmentGuard(store).submit_assignment(
        user_id, assignment_id, submission_data.content
    )


@router.get("/me/assignments/{assignment_id}", response_model=AssignmentStatusView)
async def get_assignment_status(
    assignment_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> AssignmentStatusView:
    return await DashboardAggregator(store).student_assignment_status(user_id, assignment_id)


@router.get("/me/courses/{course_id}/progress", response_model=CourseProgress)
async def get_course_progress(
    course_id: int,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> CourseProgress:
    return await DashboardAggregator(store).student_course_progress(user_id, course_id)
