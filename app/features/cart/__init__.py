"""Cart module: cart sessions over a pluggable key/value storage port."""

from app.features.cart.routes import get_cart_storage, router
from app.features.cart.service import CartSession
from app.features.cart.storage import CartStorage, InMemoryCartStorage

__all__ = [
    "CartSession",
    "CartStorage",
    "InMemoryCartStorage",
    "get_cart_storage",
    "router",
]
