"""Cart session: an explicit, persisted list of cart lines.

Every mutation writes through to the storage port. An empty cart is
represented by the absence of its key rather than an empty payload.
"""

from decimal import Decimal

from pydantic import ValidationError

from app.core.logging import get_logger
from app.features.cart.schemas import CartLine, CartProduct, CartResponse, CartState
from app.features.cart.storage import CartStorage

logger = get_logger(__name__)

DEFAULT_CART_KEY = "cart"


class CartSession:
    """Shopping cart bound to one storage key.

    Attributes:
        key: Storage key the cart persists under.
    """

    def __init__(self, storage: CartStorage, key: str = DEFAULT_CART_KEY) -> None:
        self._storage = storage
        self.key = key
        self._lines: list[CartLine] = self._load()

    @property
    def items(self) -> list[CartLine]:
        """Copy of the current lines in insertion order."""
        return [line.model_copy(deep=True) for line in self._lines]

    @property
    def subtotal(self) -> Decimal:
        """Sum of price x quantity over all lines."""
        return sum(
            (line.product.price * line.quantity for line in self._lines),
            Decimal("0"),
        )

    @property
    def item_count(self) -> int:
        """Sum of quantities over all lines."""
        return sum(line.quantity for line in self._lines)

    def add_item(self, product: CartProduct, quantity: int = 1) -> CartLine:
        """Add a product, merging with an existing line for the same product.

        Args:
            product: Product snapshot.
            quantity: Units to add (must be >= 1).

        Returns:
            The resulting line.

        Raises:
            ValueError: If quantity is below 1.
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        for line in self._lines:
            if line.product.id == product.id:
                line.quantity += quantity
                self._persist()
                logger.info(
                    "cart.item_quantity_increased",
                    cart_key=self.key,
                    product_id=product.id,
                    quantity=line.quantity,
                )
                return line.model_copy(deep=True)

        line = CartLine(product=product, quantity=quantity)
        self._lines.append(line)
        self._persist()
        logger.info(
            "cart.item_added",
            cart_key=self.key,
            product_id=product.id,
            quantity=quantity,
        )
        return line.model_copy(deep=True)

    def remove_item(self, product_id: int) -> bool:
        """Remove the line for a product.

        Returns:
            True if a line was removed.
        """
        remaining = [line for line in self._lines if line.product.id != product_id]
        removed = len(remaining) != len(self._lines)
        if removed:
            self._lines = remaining
            self._persist()
            logger.info("cart.item_removed", cart_key=self.key, product_id=product_id)
        return removed

    def update_quantity(self, product_id: int, quantity: int) -> bool:
        """Set the quantity of a line; below 1 removes the line.

        Returns:
            True if a line for the product existed.
        """
        if quantity < 1:
            return self.remove_item(product_id)

        for line in self._lines:
            if line.product.id == product_id:
                line.quantity = quantity
                self._persist()
                return True
        return False

    def clear(self) -> None:
        """Remove every line."""
        self._lines = []
        self._persist()
        logger.info("cart.cleared", cart_key=self.key)

    def to_response(self) -> CartResponse:
        """Render the cart with totals."""
        return CartResponse(
            cart_id=self.key,
            items=self.items,
            item_count=self.item_count,
            subtotal=self.subtotal,
        )

    def _load(self) -> list[CartLine]:
        raw = self._storage.get(self.key)
        if raw is None:
            return []
        try:
            return CartState.model_validate_json(raw).items
        except ValidationError as e:
            logger.warning(
                "cart.stored_cart_corrupt",
                cart_key=self.key,
                error=str(e),
            )
            self._storage.delete(self.key)
            return []

    def _persist(self) -> None:
        if self._lines:
            self._storage.set(self.key, CartState(items=self._lines).model_dump_json())
        else:
            self._storage.delete(self.key)
