"""
API test fixtures.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.database import get_db
from eduportal.main import app


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncClient:
    """Create test client with database dependency override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def as_user(user_id: str) -> dict[str, str]:
    """Headers identifying the acting user."""
    return {"X-User-Id": user_id}


@pytest.fixture
def auth():
    return as_user
