"""Test fixtures for auth module."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.auth.models import User, UserRole
from app.main import app


@pytest.fixture
def customer() -> User:
    """Detached regular account."""
    now = datetime(2024, 1, 1, tzinfo=UTC)
    return User(
        id=2,
        name="Nok",
        email="nok@shop.test",
        password_hash="x",
        role=UserRole.USER.value,
        profile_picture_url=None,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def admin_user() -> User:
    return User(id=1, name="Admin", email="admin@shop.test", password_hash="x", role="admin")


@pytest.fixture
def db_session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
async def client(db_session: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
