"""Test fixtures for catalog module."""

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.auth.deps import get_current_user
from app.features.auth.models import User, UserRole
from app.features.catalog.models import Category, Product
from app.main import app

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def make_category(category_id: int = 1, name: str = "Rackets") -> Category:
    """Build a detached category with timestamps set."""
    return Category(id=category_id, name=name, created_at=NOW, updated_at=NOW)


def make_product(
    product_id: int = 1,
    name: str = "Astrox 99 Pro",
    price: str = "199.00",
    category: Category | None = None,
) -> Product:
    """Build a detached product with its category relationship populated."""
    product = Product(
        id=product_id,
        uuid=uuid.uuid4(),
        name=name,
        description=None,
        price=Decimal(price),
        image_url=None,
        stock=10,
        featured=False,
        category_id=category.id if category else None,
        created_at=NOW,
        updated_at=NOW,
    )
    product.category = category
    return product


@pytest.fixture
def rackets() -> Category:
    return make_category(1, "Rackets")


@pytest.fixture
def racket(rackets: Category) -> Product:
    return make_product(1, "Astrox 99 Pro", "199.00", rackets)


@pytest.fixture
def shuttles() -> Product:
    """Uncategorized product."""
    return make_product(2, "Aerosensa 50 (tube)", "24.00", None)


@pytest.fixture
def admin_user() -> User:
    return User(
        id=1, name="Admin", email="admin@shop.test", password_hash="x", role=UserRole.ADMIN.value
    )


@pytest.fixture
def customer() -> User:
    return User(
        id=2, name="Nok", email="nok@shop.test", password_hash="x", role=UserRole.USER.value
    )


@pytest.fixture
def db_session() -> AsyncMock:
    """Stand-in session; services are patched in route tests."""
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


@pytest.fixture
def login_as():
    """Authenticate subsequent requests as the given user."""

    def _login(user: User) -> None:
        async def override_current_user() -> User:
            return user

        app.dependency_overrides[get_current_user] = override_current_user

    return _login
