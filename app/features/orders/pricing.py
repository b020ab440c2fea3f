"""Checkout pricing, order numbering and the mock payment step."""

import secrets
from dataclasses import dataclass
from decimal import Decimal

from app.core.config import Settings, get_settings
from app.core.logging import get_logger
from app.shared.utils import quantize_money

logger = get_logger(__name__)

ORDER_NUMBER_PREFIX = "ORD-"


@dataclass(frozen=True)
class OrderTotals:
    """Monetary breakdown of an order."""

    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal


def compute_totals(subtotal: Decimal, settings: Settings | None = None) -> OrderTotals:
    """Price an order from its subtotal.

    Shipping is free strictly above the threshold; tax is charged on the
    subtotal only.

    Args:
        subtotal: Sum of unit_price x quantity over all lines.
        settings: Overrides the process settings (tests).

    Returns:
        OrderTotals with every amount rounded to cents.
    """
    settings = settings or get_settings()
    subtotal = quantize_money(subtotal)

    if subtotal > settings.checkout_free_shipping_threshold:
        shipping = Decimal("0.00")
    else:
        shipping = quantize_money(settings.checkout_flat_shipping_fee)

    tax = quantize_money(subtotal * settings.checkout_tax_rate)
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )


def generate_order_number() -> str:
    """Random six-digit order reference, e.g. ``ORD-042917``."""
    return f"{ORDER_NUMBER_PREFIX}{secrets.randbelow(1_000_000):06d}"


def authorize_payment(amount: Decimal, payment_method: str) -> str:
    """Mock payment gateway: always approves.

    Returns:
        Payment reference.
    """
    reference = f"MOCK-{secrets.token_hex(8).upper()}"
    logger.info(
        "orders.payment_authorized",
        amount=str(amount),
        payment_method=payment_method,
        payment_reference=reference,
    )
    return reference
