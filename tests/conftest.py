"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.gl_common.database import get_db_session
from src.main import app


@pytest.fixture
def db_session() -> AsyncMock:
    """Stand-in AsyncSession; stores under test never touch it for real."""
    return AsyncMock()


@pytest.fixture
async def client(db_session: AsyncMock) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints without a database."""

    async def _override_db():  # type: ignore[no-untyped-def]
        yield db_session

    app.dependency_overrides[get_db_session] = _override_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
