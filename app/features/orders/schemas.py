"""Pydantic schemas for checkout and order endpoints."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from app.features.orders.models import OrderStatus


class PaymentMethod(str, Enum):
    """Accepted payment methods (all handled by the mock gateway)."""

    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"


class ShippingAddress(BaseModel):
    """Delivery address captured at checkout."""

    full_name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)


class CheckoutItem(BaseModel):
    """Requested product and quantity; the price comes from the catalog."""

    product_id: int
    quantity: int = Field(..., ge=1, le=999)


class CheckoutRequest(BaseModel):
    """Checkout payload.

    When ``cart_id`` is set, that server-held cart is emptied after the
    order is stored.
    """

    items: list[CheckoutItem] = Field(..., min_length=1)
    shipping_address: ShippingAddress
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    cart_id: str | None = Field(None, pattern=r"^[A-Za-z0-9_-]{1,64}$")


class OrderItemResponse(BaseModel):
    """Order line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int | None
    quantity: int
    unit_price: Decimal


class OrderResponse(BaseModel):
    """Order with its lines."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    user_id: int | None
    status: OrderStatus
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total_price: Decimal
    shipping_address: dict[str, str | None]
    payment_method: str
    payment_reference: str | None
    items: list[OrderItemResponse]
    created_at: datetime


class OrderStatusUpdate(BaseModel):
    """New lifecycle state for an order."""

    status: OrderStatus
