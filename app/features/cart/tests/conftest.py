"""Test fixtures for cart module."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.cart.routes import get_cart_storage
from app.features.cart.schemas import CartProduct
from app.features.cart.storage import InMemoryCartStorage
from app.main import app


@pytest.fixture
def storage() -> InMemoryCartStorage:
    return InMemoryCartStorage()


@pytest.fixture
def racket() -> CartProduct:
    return CartProduct(id=1, name="Astrox 99 Pro", price=Decimal("199.00"))


@pytest.fixture
def shuttles() -> CartProduct:
    return CartProduct(id=2, name="Aerosensa 50", price=Decimal("24.50"))


@pytest.fixture
async def client(storage: InMemoryCartStorage) -> AsyncGenerator[AsyncClient, None]:
    """Test client with a fresh cart storage and a stand-in session."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cart_storage] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
