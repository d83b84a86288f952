"""
Dashboard API Endpoint

Role-specific view model for the acting user.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends

from eduportal.api.deps import get_current_user_id, get_store
from eduportal.core.schemas import AdminDashboard, StudentDashboard, TeacherDashboard
from eduportal.progress import DashboardAggregator
from eduportal.store import RecordStore

router = APIRouter()


@router.get("/", response_model=StudentDashboard | TeacherDashboard | AdminDashboard)
async def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> StudentDashboard | TeacherDashboard | AdminDashboard:
    """Dashboard for the acting user, rebuilt from a fresh read."""
    return await DashboardAggregator(store).build(user_id)
