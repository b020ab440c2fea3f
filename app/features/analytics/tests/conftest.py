"""Test fixtures for analytics module."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.analytics.snapshot import (
    CategoryRef,
    OrderLineSnapshot,
    OrderSnapshot,
    ProductSnapshot,
)
from app.features.auth.deps import get_current_user
from app.features.auth.models import User
from app.main import app


@pytest.fixture
def make_order() -> Callable[..., OrderSnapshot]:
    """Factory for order snapshots; amounts given as strings."""
    counter = iter(range(1, 10_000))

    def _make(
        status: str = "paid",
        total: str = "100",
        created_at: datetime = datetime(2024, 1, 15, tzinfo=UTC),
        items: list[tuple[int | None, int, str]] | None = None,
    ) -> OrderSnapshot:
        return OrderSnapshot(
            id=next(counter),
            status=status,
            total_price=Decimal(total),
            created_at=created_at,
            items=tuple(
                OrderLineSnapshot(product_id=pid, quantity=qty, unit_price=Decimal(price))
                for pid, qty, price in (items or [])
            ),
        )

    return _make


@pytest.fixture
def products() -> list[ProductSnapshot]:
    """Racket (1), shoe (2) and an uncategorized grip (3)."""
    return [
        ProductSnapshot(id=1, category=CategoryRef(id=1, name="Rackets")),
        ProductSnapshot(id=2, category=CategoryRef(id=2, name="Shoes")),
        ProductSnapshot(id=3, category=None),
    ]


@pytest.fixture
def admin_user() -> User:
    return User(id=1, name="Admin", email="admin@shop.test", password_hash="x", role="admin")


@pytest.fixture
def customer() -> User:
    return User(id=2, name="Nok", email="nok@shop.test", password_hash="x", role="user")


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Authenticate subsequent requests as the given user."""

    def _login(user: User) -> None:
        async def override_current_user() -> User:
            return user

        app.dependency_overrides[get_current_user] = override_current_user

    return _login
