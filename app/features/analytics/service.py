"""Service layer for the revenue dashboard.

Loads the full order and product snapshots, then hands them to the pure
aggregator. Both reads run on the request's session, one after the other.
"""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import get_logger
from app.features.analytics.aggregator import build_revenue_dashboard
from app.features.analytics.schemas import RevenueDashboardResponse, TimeRange
from app.features.analytics.snapshot import order_from_model, product_from_model
from app.features.catalog.service import CatalogService
from app.features.orders.service import OrderService

logger = get_logger(__name__)


class AnalyticsService:
    """Revenue dashboard computation."""

    def __init__(self) -> None:
        self.settings = get_settings()

    async def get_revenue_dashboard(
        self,
        db: AsyncSession,
        time_range: TimeRange,
        now: datetime | None = None,
    ) -> RevenueDashboardResponse:
        """Build the revenue dashboard for a trailing window.

        Args:
            db: Database session.
            time_range: 3, 6 or 12 trailing months.
            now: Reference time (defaults to the current UTC time).

        Returns:
            Month buckets, category sales and summary stats.

        Raises:
            InvalidAmountError: If a stored amount cannot be parsed; no
                partial dashboard is returned.
        """
        now = now or datetime.now(UTC)

        order_rows = await OrderService().list_all_orders(db)
        product_rows = await CatalogService().list_all_products(db)

        orders = [order_from_model(o) for o in order_rows]
        products = [product_from_model(p) for p in product_rows]

        dashboard = build_revenue_dashboard(
            orders,
            products,
            window_length=time_range.months,
            now=now,
            tz=ZoneInfo(self.settings.analytics_timezone),
        )

        logger.info(
            "analytics.revenue_dashboard_computed",
            time_range=time_range.value,
            order_count=len(orders),
            product_count=len(products),
            recognized_orders=dashboard.stats.total_orders,
            total_revenue=str(dashboard.stats.total_revenue),
            category_count=len(dashboard.category_sales),
        )

        return RevenueDashboardResponse.from_dashboard(dashboard, time_range, generated_at=now)
