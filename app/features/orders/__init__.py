"""Orders module: checkout, order history and status management."""

from app.features.orders.models import Order, OrderItem, OrderStatus
from app.features.orders.routes import router
from app.features.orders.service import OrderService

__all__ = ["Order", "OrderItem", "OrderService", "OrderStatus", "router"]
