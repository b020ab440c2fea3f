"""Unit tests for order service (mocked session)."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.exceptions import NotFoundError
from app.features.catalog.service import CatalogService
from app.features.orders.models import Order, OrderStatus
from app.features.orders.schemas import CheckoutItem, CheckoutRequest
from app.features.orders.service import OrderService, merge_checkout_items


ADDRESS = {
    "full_name": "Nok T.",
    "address": "99 Sukhumvit Rd",
    "city": "Bangkok",
    "postal_code": "10110",
    "country": "Thailand",
}


def _request(*lines: tuple[int, int]) -> CheckoutRequest:
    return CheckoutRequest(
        items=[CheckoutItem(product_id=pid, quantity=qty) for pid, qty in lines],
        shipping_address=ADDRESS,
        payment_method="paypal",
    )


def _session() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    return db


def test_merge_checkout_items_keeps_first_seen_order():
    merged = merge_checkout_items(
        [
            CheckoutItem(product_id=2, quantity=1),
            CheckoutItem(product_id=1, quantity=1),
            CheckoutItem(product_id=2, quantity=3),
        ]
    )

    assert list(merged.items()) == [(2, 4), (1, 1)]


class TestCheckout:
    async def _checkout(self, db, user, request, catalog) -> Order:
        service = OrderService()

        async def load(_db, _order_id):
            return db.add.call_args.args[0]

        with (
            patch.object(
                CatalogService, "get_products_by_ids", new=AsyncMock(return_value=catalog)
            ),
            patch.object(
                service, "_unique_order_number", new=AsyncMock(return_value="ORD-000001")
            ),
            patch.object(service, "_load", new=AsyncMock(side_effect=load)),
        ):
            return await service.checkout(db, user, request)

    async def test_prices_lines_from_catalog(self, customer, catalog):
        db = _session()

        order = await self._checkout(db, customer, _request((2, 2)), catalog)

        assert order.status == OrderStatus.PAID.value
        assert order.user_id == customer.id
        assert order.order_number == "ORD-000001"
        assert [(i.product_id, i.quantity, i.unit_price) for i in order.items] == [
            (2, 2, Decimal("10.50"))
        ]
        assert order.subtotal == Decimal("21.00")
        assert order.shipping == Decimal("4.99")
        assert order.tax == Decimal("1.47")
        assert order.total_price == Decimal("27.46")
        assert order.payment_method == "paypal"
        assert order.payment_reference.startswith("MOCK-")
        assert order.shipping_address["city"] == "Bangkok"
        db.flush.assert_awaited_once()

    async def test_duplicate_lines_merged(self, customer, catalog):
        order = await self._checkout(_session(), customer, _request((1, 1), (1, 2)), catalog)

        assert len(order.items) == 1
        assert order.items[0].quantity == 3
        assert order.shipping == Decimal("0.00")

    async def test_unknown_product_rejected(self, customer, catalog):
        db = _session()

        with pytest.raises(NotFoundError) as exc_info:
            await self._checkout(db, customer, _request((1, 1), (9, 1), (8, 1)), catalog)

        assert exc_info.value.details == {"product_ids": [8, 9]}
        db.add.assert_not_called()


class TestUpdateStatus:
    async def test_missing_order(self):
        db = AsyncMock()
        db.get.return_value = None

        assert await OrderService().update_status(db, 404, OrderStatus.SHIPPED) is None

    async def test_sets_status(self, paid_order):
        db = AsyncMock()
        db.get.return_value = paid_order
        service = OrderService()

        with patch.object(service, "_load", new=AsyncMock(return_value=paid_order)):
            order = await service.update_status(db, paid_order.id, OrderStatus.SHIPPED)

        assert order.status == "shipped"
        db.flush.assert_awaited_once()
