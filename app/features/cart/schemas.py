"""Pydantic schemas for cart contents and cart endpoints."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CartProduct(BaseModel):
    """Product details captured when an item is added to the cart.

    The price is the catalog price at add time; checkout re-prices from the
    catalog.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    image_url: str | None = None


class CartLine(BaseModel):
    """One product and its quantity."""

    product: CartProduct
    quantity: int = Field(..., ge=1)


class CartState(BaseModel):
    """Serialized form persisted through CartStorage."""

    items: list[CartLine] = Field(default_factory=list)


class CartResponse(BaseModel):
    """Cart contents with computed totals."""

    cart_id: str
    items: list[CartLine]
    item_count: int = Field(..., ge=0, description="Sum of quantities across lines.")
    subtotal: Decimal = Field(..., description="Sum of price x quantity across lines.")


class AddCartItemRequest(BaseModel):
    """Add a product (or more of it) to the cart."""

    product_id: int
    quantity: int = Field(1, ge=1, le=999)


class UpdateCartItemRequest(BaseModel):
    """Set a line's quantity; values below 1 remove the line."""

    quantity: int = Field(..., le=999)
