"""
Evaluation API Endpoints

Teacher grading of student submissions.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends

from eduportal.api.deps import get_current_user_id, get_store
from eduportal.core.schemas import EvaluationPatch, SubmissionRecord
from eduportal.progress import EvaluationMutator
from eduportal.store import RecordStore

router = APIRouter()


@router.get("/pending", response_model=list[SubmissionRecord])
async def list_pending_evaluations(
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> list[SubmissionRecord]:
    """Ungraded submissions across the acting teacher's courses."""
    return await EvaluationMutator(store).pending_evaluations(user_id)


@router.patch("/submissions/{submission_id}", response_model=SubmissionRecord)
async def evaluate_submission(
    submission_id: int,
    evaluation: EvaluationPatch,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> SubmissionRecord:
    """Merge a grade and/or feedback into a submission.

    Fields left out of the body keep their current value.
    """
    return await EvaluationMutator(store).apply_evaluation(submission_id, evaluation, user_id)
