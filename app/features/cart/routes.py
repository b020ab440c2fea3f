"""API routes for server-held carts.

Carts are addressed by a client-chosen ``cart_id`` and live in the
configured CartStorage.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.features.cart.schemas import (
    AddCartItemRequest,
    CartProduct,
    CartResponse,
    UpdateCartItemRequest,
)
from app.features.cart.service import CartSession
from app.features.cart.storage import CartStorage, InMemoryCartStorage
from app.features.catalog.service import CatalogService

router = APIRouter(prefix="/cart", tags=["cart"])

CART_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


@lru_cache
def get_cart_storage() -> CartStorage:
    """Process-wide cart storage."""
    return InMemoryCartStorage()


def get_cart_session(
    cart_id: str = Path(..., pattern=CART_ID_PATTERN, description="Client-chosen cart key."),
    storage: CartStorage = Depends(get_cart_storage),
) -> CartSession:
    """Open the cart stored under cart_id."""
    return CartSession(storage, key=cart_id)


@router.get("/{cart_id}", response_model=CartResponse, summary="Get cart contents")
async def get_cart(cart: CartSession = Depends(get_cart_session)) -> CartResponse:
    """Return the cart; unknown ids yield an empty cart."""
    return cart.to_response()


@router.post(
    "/{cart_id}/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a product to the cart",
)
async def add_cart_item(
    request: AddCartItemRequest,
    cart: CartSession = Depends(get_cart_session),
    db: AsyncSession = Depends(get_db),
) -> CartResponse:
    """Add a catalog product; an existing line's quantity is increased.

    Raises:
        NotFoundError: If the product does not exist.
    """
    product = await CatalogService().get_product(db=db, product_ref=request.product_id)
    if product is None:
        raise NotFoundError(
            f"Product not found: {request.product_id}",
            details={"product_id": request.product_id},
        )
    cart.add_item(CartProduct.model_validate(product), request.quantity)
    return cart.to_response()


@router.patch(
    "/{cart_id}/items/{product_id}",
    response_model=CartResponse,
    summary="Change a line's quantity",
)
async def update_cart_item(
    product_id: int,
    request: UpdateCartItemRequest,
    cart: CartSession = Depends(get_cart_session),
) -> CartResponse:
    """Set quantity; a quantity below 1 removes the line.

    Raises:
        NotFoundError: If the product is not in the cart.
    """
    if not cart.update_quantity(product_id, request.quantity):
        raise NotFoundError(
            f"Product {product_id} is not in the cart",
            details={"product_id": product_id},
        )
    return cart.to_response()


@router.delete(
    "/{cart_id}/items/{product_id}",
    response_model=CartResponse,
    summary="Remove a line",
)
async def remove_cart_item(
    product_id: int,
    cart: CartSession = Depends(get_cart_session),
) -> CartResponse:
    """Remove a product from the cart.

    Raises:
        NotFoundError: If the product is not in the cart.
    """
    if not cart.remove_item(product_id):
        raise NotFoundError(
            f"Product {product_id} is not in the cart",
            details={"product_id": product_id},
        )
    return cart.to_response()


@router.delete(
    "/{cart_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Empty the cart",
)
async def clear_cart(cart: CartSession = Depends(get_cart_session)) -> None:
    """Remove every line."""
    cart.clear()
