"""Test fixtures for orders module."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.features.auth.deps import get_current_user
from app.features.auth.models import User, UserRole
from app.features.cart.routes import get_cart_storage
from app.features.cart.storage import InMemoryCartStorage
from app.features.catalog.models import Product
from app.features.orders.models import Order, OrderItem, OrderStatus
from app.main import app

NOW = datetime(2024, 2, 10, 9, 30, tzinfo=UTC)

SHIPPING_ADDRESS = {
    "full_name": "Nok T.",
    "address": "99 Sukhumvit Rd",
    "city": "Bangkok",
    "postal_code": "10110",
    "country": "Thailand",
    "phone": None,
}


@pytest.fixture
def customer() -> User:
    return User(
        id=2, name="Nok", email="nok@shop.test", password_hash="x", role=UserRole.USER.value
    )


@pytest.fixture
def admin_user() -> User:
    return User(id=1, name="Admin", email="admin@shop.test", password_hash="x", role="admin")


@pytest.fixture
def catalog() -> dict[int, Product]:
    """Products as returned by CatalogService.get_products_by_ids."""
    return {
        1: Product(id=1, name="Astrox 99 Pro", price=Decimal("199.00"), stock=5),
        2: Product(id=2, name="Aerosensa 50", price=Decimal("10.50"), stock=40),
    }


@pytest.fixture
def paid_order() -> Order:
    """Stored order with one line, as OrderService returns it."""
    return Order(
        id=5,
        order_number="ORD-000123",
        user_id=2,
        status=OrderStatus.PAID.value,
        subtotal=Decimal("21.00"),
        tax=Decimal("1.47"),
        shipping=Decimal("4.99"),
        total_price=Decimal("27.46"),
        shipping_address=SHIPPING_ADDRESS,
        payment_method="credit_card",
        payment_reference="MOCK-ABC",
        items=[OrderItem(id=1, product_id=2, quantity=2, unit_price=Decimal("10.50"))],
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def storage() -> InMemoryCartStorage:
    return InMemoryCartStorage()


@pytest.fixture
def session() -> AsyncMock:
    """Stand-in for the request session."""
    return AsyncMock()


@pytest.fixture
async def client(
    storage: InMemoryCartStorage, session: AsyncMock
) -> AsyncGenerator[AsyncClient, None]:
    """Test client with a stand-in session and fresh cart storage."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cart_storage] = lambda: storage

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
