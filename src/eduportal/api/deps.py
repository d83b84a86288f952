"""
Shared API Dependencies

Request-scoped store and acting-user resolution.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.config import settings
from eduportal.core.database import get_db
from eduportal.store import RecordStore, SQLAlchemyRecordStore


async def get_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    """One record store per request, bound to the request's session."""
    return SQLAlchemyRecordStore(db)


async def get_current_user_id(request: Request) -> str:
    """Acting user id as resolved by the upstream auth layer.

    Identity verification happens before requests reach this service; this
    only reads the forwarded id.
    """
    user_id = request.headers.get(settings.USER_ID_HEADER, "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {settings.USER_ID_HEADER} header",
        )
    return user_id
