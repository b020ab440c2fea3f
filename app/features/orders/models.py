"""Order ORM models: orders and their line items.

Totals are computed once at checkout and stored; nothing downstream
recomputes them.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.features.auth.models import User
from app.features.catalog.models import Product
from app.shared.models import TimestampMixin


class OrderStatus(str, Enum):
    """Order lifecycle states.

    Only PAID and SHIPPED count as recognized revenue.
    """

    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(TimestampMixin, Base):
    """Customer order.

    Attributes:
        id: Primary key.
        order_number: Human-facing reference ("ORD-123456").
        user_id: Purchasing account (nullable once the account is deleted).
        status: Lifecycle state.
        subtotal: Sum of line totals.
        tax: Sales tax on the subtotal.
        shipping: Shipping fee.
        total_price: subtotal + tax + shipping.
        shipping_address: Address snapshot as JSONB.
        payment_method: credit_card, paypal or bank_transfer.
        payment_reference: Reference returned by the payment step.
    """

    # "order" is reserved in SQL
    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id", ondelete="SET NULL"), index=True, nullable=True
    )
    status: Mapped[str] = mapped_column(String(20), default=OrderStatus.PENDING.value, index=True)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    tax: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    shipping: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    shipping_address: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict)
    payment_method: Mapped[str] = mapped_column(String(30))
    payment_reference: Mapped[str | None] = mapped_column(String(64), nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    user: Mapped[User | None] = relationship()

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'paid', 'processing', 'shipped', 'delivered', 'cancelled')",
            name="ck_customer_order_valid_status",
        ),
        CheckConstraint("total_price >= 0", name="ck_customer_order_total_positive"),
    )


class OrderItem(Base):
    """One product line of an order.

    Attributes:
        id: Primary key.
        order_id: Owning order.
        product_id: Purchased product (nullable once the product is deleted).
        quantity: Units purchased.
        unit_price: Price per unit at checkout time.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer_order.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("product.id", ondelete="SET NULL"), index=True, nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    order: Mapped["Order"] = relationship(back_populates="items")
    product: Mapped[Product | None] = relationship()

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_order_item_price_positive"),
    )
