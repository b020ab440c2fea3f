"""Service layer for checkout and order management.

Checkout re-prices every line from the catalog; client-side prices are
never trusted.
"""

from collections import OrderedDict
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.features.auth.models import User
from app.features.catalog.service import CatalogService
from app.features.orders.models import Order, OrderItem, OrderStatus
from app.features.orders.pricing import (
    authorize_payment,
    compute_totals,
    generate_order_number,
)
from app.features.orders.schemas import CheckoutItem, CheckoutRequest

logger = get_logger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


def merge_checkout_items(items: list[CheckoutItem]) -> OrderedDict[int, int]:
    """Collapse repeated products into one quantity per product, in first-seen order."""
    merged: OrderedDict[int, int] = OrderedDict()
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return merged


class OrderService:
    """Checkout and order queries."""

    async def checkout(
        self,
        db: AsyncSession,
        user: User,
        request: CheckoutRequest,
    ) -> Order:
        """Price, pay for and store an order.

        Args:
            db: Database session.
            user: Purchasing user.
            request: Lines, address and payment method.

        Returns:
            Stored order (status ``paid``) with items loaded.

        Raises:
            NotFoundError: If any product id is unknown.
        """
        quantities = merge_checkout_items(request.items)
        products = await CatalogService().get_products_by_ids(db, set(quantities))

        missing = sorted(pid for pid in quantities if pid not in products)
        if missing:
            raise NotFoundError(
                f"Products not found: {', '.join(str(pid) for pid in missing)}",
                details={"product_ids": missing},
            )

        lines = [
            OrderItem(
                product_id=pid,
                quantity=qty,
                unit_price=products[pid].price,
            )
            for pid, qty in quantities.items()
        ]
        subtotal = sum((line.unit_price * line.quantity for line in lines), Decimal("0"))
        totals = compute_totals(subtotal)
        payment_reference = authorize_payment(totals.total, request.payment_method.value)

        order = Order(
            order_number=await self._unique_order_number(db),
            user_id=user.id,
            status=OrderStatus.PAID.value,
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total_price=totals.total,
            shipping_address=request.shipping_address.model_dump(),
            payment_method=request.payment_method.value,
            payment_reference=payment_reference,
            items=lines,
        )
        db.add(order)
        await db.flush()

        logger.info(
            "orders.checkout_completed",
            order_id=order.id,
            order_number=order.order_number,
            user_id=user.id,
            line_count=len(lines),
            total_price=str(totals.total),
        )
        return await self._load(db, order.id)

    async def list_all_orders(self, db: AsyncSession) -> list[Order]:
        """All orders with items, newest first."""
        stmt = (
            select(Order)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        orders = list((await db.execute(stmt)).scalars().all())
        logger.info("orders.listed", count=len(orders))
        return orders

    async def list_user_orders(self, db: AsyncSession, user_id: int) -> list[Order]:
        """One user's orders with items, newest first."""
        stmt = (
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list((await db.execute(stmt)).scalars().all())

    async def update_status(
        self,
        db: AsyncSession,
        order_id: int,
        new_status: OrderStatus,
    ) -> Order | None:
        """Set an order's status.

        Returns:
            Updated order, or None if not found.
        """
        order = await db.get(Order, order_id)
        if order is None:
            return None

        previous = order.status
        order.status = new_status.value
        await db.flush()

        logger.info(
            "orders.status_updated",
            order_id=order_id,
            previous_status=previous,
            status=new_status.value,
        )
        return await self._load(db, order_id)

    async def _unique_order_number(self, db: AsyncSession) -> str:
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number()
            stmt = select(Order.id).where(Order.order_number == candidate)
            if (await db.execute(stmt)).first() is None:
                return candidate
        # the unique constraint still guards a collision on flush
        return generate_order_number()

    async def _load(self, db: AsyncSession, order_id: int) -> Order:
        stmt = (
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one()
