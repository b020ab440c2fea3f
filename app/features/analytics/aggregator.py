"""Revenue aggregation over order/product snapshots.

Pure, synchronous functions: no I/O, no shared state. Money stays Decimal
end to end so month buckets sum to total revenue exactly; only the
percentage-style figures (category share, growth) are floats.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal

from app.features.analytics.snapshot import OrderSnapshot, ProductSnapshot
from app.features.orders.models import OrderStatus
from app.shared.utils import quantize_money

REVENUE_STATUSES = frozenset({OrderStatus.PAID.value, OrderStatus.SHIPPED.value})

WINDOW_LENGTHS = (3, 6, 12)
DEFAULT_WINDOW_LENGTH = 6

# Fixed English abbreviations; labels must not depend on the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip

ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthBucket:
    label: str
    revenue: Decimal
    order_count: int


@dataclass(frozen=True)
class CategorySales:
    category: str
    sales: Decimal
    percentage: float


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: Decimal
    total_orders: int
    total_products: int
    average_order_value: Decimal
    revenue_growth: float
    order_growth: float


@dataclass(frozen=True)
class RevenueDashboard:
    """Everything the revenue dashboard renders."""

    months: list[MonthBucket]
    category_sales: list[CategorySales]
    stats: DashboardStats


def is_revenue_recognized(order: OrderSnapshot) -> bool:
    return order.status in REVENUE_STATUSES


def month_label(moment: datetime, tz: tzinfo | None = None) -> str:
    """Format a timestamp as "{Mon} {YYYY}".

    Aware timestamps are converted to ``tz`` first; naive ones are taken
    as already being in the reporting zone.
    """
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return f"{MONTH_ABBREVIATIONS[moment.month - 1]} {moment.year:04d}"


def build_month_window(window_length: int, now: datetime) -> list[str]:
    """Trailing month labels, oldest first, ending at ``now``'s month.

    Lengths other than 3, 6 or 12 fall back to 6.
    """
    if window_length not in WINDOW_LENGTHS:
        window_length = DEFAULT_WINDOW_LENGTH

    current = now.year * 12 + (now.month - 1)
    labels = []
    for offset in range(window_length - 1, -1, -1):
        year, month_index = divmod(current - offset, 12)
        labels.append(f"{MONTH_ABBREVIATIONS[month_index]} {year:04d}")
    return labels


def bucket_revenue(
    orders: Iterable[OrderSnapshot],
    month_labels: Sequence[str],
    tz: tzinfo | None = None,
) -> list[MonthBucket]:
    """Sum recognized revenue and order counts per month label.

    Orders outside the window are ignored. Every label gets a bucket.
    """
    revenue = dict.fromkeys(month_labels, ZERO)
    counts = dict.fromkeys(month_labels, 0)

    for order in orders:
        if not is_revenue_recognized(order):
            continue
        label = month_label(order.created_at, tz)
        if label in revenue:
            revenue[label] += order.total_price
            counts[label] += 1

    return [
        MonthBucket(label=label, revenue=revenue[label], order_count=counts[label])
        for label in month_labels
    ]


def bucket_category_sales(
    orders: Iterable[OrderSnapshot],
    products: Iterable[ProductSnapshot],
) -> list[CategorySales]:
    """Line-item sales per category, largest first.

    Lines whose product is unknown or uncategorized are left out of both the
    per-category sums and the grand total the percentages are taken against.
    """
    category_by_product = {
        p.id: p.category.name for p in products if p.category is not None
    }

    # dicts keep first-encounter order, which the stable sort below preserves for ties
    sales: dict[str, Decimal] = {}
    for order in orders:
        if not is_revenue_recognized(order):
            continue
        for line in order.items:
            category = category_by_product.get(line.product_id)
            if category is None:
                continue
            sales[category] = sales.get(category, ZERO) + line.unit_price * line.quantity

    grand_total = sum(sales.values(), ZERO)
    result = [
        CategorySales(
            category=category,
            sales=amount,
            percentage=float(amount / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for category, amount in sales.items()
    ]
    result.sort(key=lambda c: c.sales, reverse=True)
    return result


def _growth(previous: Decimal | int, current: Decimal | int) -> float:
    if previous <= 0:
        return 0.0
    return float(Decimal(current - previous) / Decimal(previous) * 100)


def compute_stats(
    orders: Iterable[OrderSnapshot],
    products: Sequence[ProductSnapshot],
    month_buckets: Sequence[MonthBucket],
) -> DashboardStats:
    """Headline figures plus growth between the last two month buckets."""
    recognized = [o for o in orders if is_revenue_recognized(o)]
    total_revenue = sum((o.total_price for o in recognized), ZERO)
    total_orders = len(recognized)

    if total_orders:
        average_order_value = quantize_money(total_revenue / total_orders)
    else:
        average_order_value = ZERO

    revenue_growth = order_growth = 0.0
    if len(month_buckets) >= 2:
        prev, curr = month_buckets[-2], month_buckets[-1]
        revenue_growth = _growth(prev.revenue, curr.revenue)
        order_growth = _growth(prev.order_count, curr.order_count)

    return DashboardStats(
        total_revenue=total_revenue,
        total_orders=total_orders,
        total_products=len(products),
        average_order_value=average_order_value,
        revenue_growth=revenue_growth,
        order_growth=order_growth,
    )


def build_revenue_dashboard(
    orders: Sequence[OrderSnapshot],
    products: Sequence[ProductSnapshot],
    window_length: int,
    now: datetime,
    tz: tzinfo | None = None,
) -> RevenueDashboard:
    """Run the full aggregation for one dashboard request.

    Args:
        orders: Full order snapshot.
        products: Full product snapshot.
        window_length: Trailing months (3, 6 or 12).
        now: Reference time; its month closes the window.
        tz: Reporting zone used to label aware timestamps.
    """
    if tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)

    months = bucket_revenue(orders, build_month_window(window_length, now), tz)
    return RevenueDashboard(
        months=months,
        category_sales=bucket_category_sales(orders, products),
        stats=compute_stats(orders, products, months),
    )
