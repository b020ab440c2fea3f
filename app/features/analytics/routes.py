"""API routes for the admin revenue dashboard."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.features.analytics.schemas import RevenueDashboardResponse, TimeRange
from app.features.analytics.service import AnalyticsService
from app.features.auth.deps import require_admin

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get(
    "/revenue-dashboard",
    response_model=RevenueDashboardResponse,
    summary="Revenue dashboard",
    dependencies=[Depends(require_admin)],
    description="""
Aggregate all orders and products into the admin revenue dashboard.

**Revenue recognition**: only `paid` and `shipped` orders count.

**Output**:
- `months`: one bucket per trailing month (oldest first, no gaps) with
  revenue and order count
- `category_sales`: line-item sales per category, largest first, with the
  share of categorized sales; lines without a category are excluded
- `stats`: total revenue, order and product counts, average order value and
  growth between the last two months

**Time range**: `3months`, `6months` or `12months`; defaults to the
configured range.

A stored amount that cannot be parsed fails the whole request with a 422
problem response.
""",
)
async def get_revenue_dashboard(
    time_range: TimeRange | None = Query(None, description="Trailing window"),
    db: AsyncSession = Depends(get_db),
) -> RevenueDashboardResponse:
    """Compute the revenue dashboard (admin only)."""
    selected = time_range or TimeRange(get_settings().analytics_default_time_range)
    return await AnalyticsService().get_revenue_dashboard(db=db, time_range=selected)
