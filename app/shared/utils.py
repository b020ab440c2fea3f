"""Money helpers shared by checkout pricing and the revenue dashboard."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def quantize_money(amount: Decimal) -> Decimal:
    """Round half-up to whole cents (0.005 -> 0.01)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
