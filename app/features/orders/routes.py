"""API routes for checkout and orders."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import DatabaseError, NotFoundError
from app.core.logging import get_logger
from app.features.auth.deps import get_current_user, require_admin
from app.features.auth.models import User
from app.features.cart.routes import get_cart_storage
from app.features.cart.service import CartSession
from app.features.cart.storage import CartStorage
from app.features.orders.schemas import CheckoutRequest, OrderResponse, OrderStatusUpdate
from app.features.orders.service import OrderService

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="""
Price the requested lines from the catalog, run the (mock) payment step and
store the order as `paid`.

Pricing: shipping is free above the configured threshold, otherwise a flat
fee; tax is charged on the subtotal and rounded half-up to cents.

If `cart_id` is given, that cart is emptied once the order is committed; a
failed checkout leaves it untouched.
""",
)
async def checkout(
    request: CheckoutRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cart_storage: CartStorage = Depends(get_cart_storage),
) -> OrderResponse:
    """Place an order for the authenticated user.

    Raises:
        NotFoundError: If a product does not exist.
        DatabaseError: If the order cannot be stored.
    """
    try:
        order = await OrderService().checkout(db=db, user=user, request=request)
        # the cart is only emptied once the order is durable
        await db.commit()
    except SQLAlchemyError as e:
        logger.error(
            "orders.checkout_failed",
            user_id=user.id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to place order", details={"error": str(e)}) from e

    if request.cart_id:
        CartSession(cart_storage, key=request.cart_id).clear()

    return OrderResponse.model_validate(order)


@router.get(
    "",
    response_model=list[OrderResponse],
    summary="List all orders",
    dependencies=[Depends(require_admin)],
)
async def list_orders(db: AsyncSession = Depends(get_db)) -> list[OrderResponse]:
    """All orders with items, newest first (admin only)."""
    orders = await OrderService().list_all_orders(db=db)
    return [OrderResponse.model_validate(o) for o in orders]


@router.get(
    "/me",
    response_model=list[OrderResponse],
    summary="List my orders",
)
async def list_my_orders(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[OrderResponse]:
    """Orders placed by the authenticated user."""
    orders = await OrderService().list_user_orders(db=db, user_id=user.id)
    return [OrderResponse.model_validate(o) for o in orders]


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    dependencies=[Depends(require_admin)],
)
async def update_order_status(
    order_id: int,
    request: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Move an order to a new lifecycle state (admin only)."""
    order = await OrderService().update_status(db=db, order_id=order_id, new_status=request.status)
    if order is None:
        raise NotFoundError(
            f"Order not found: {order_id}",
            details={"order_id": order_id},
        )
    return OrderResponse.model_validate(order)
