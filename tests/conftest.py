"""Fixtures shared by the root-level tests.

``db_session`` needs PostgreSQL at DATABASE_URL; tests using it are marked
``integration`` and deselected by default (``pytest -m integration``).
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.auth.models import User  # noqa: F401
from app.features.catalog.models import Category, Product  # noqa: F401
from app.features.orders.models import Order, OrderItem  # noqa: F401
from app.main import app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session inside an outer transaction that is rolled back after the test.

    Services only flush, so nothing a test writes outlives it; the shop
    tables themselves are created up front and dropped at the end.
    """
    engine = create_async_engine(get_settings().database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with engine.connect() as conn:
        outer = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)
        try:
            yield session
        finally:
            await session.close()
            await outer.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
