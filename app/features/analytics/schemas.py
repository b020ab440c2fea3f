"""Pydantic schemas for the revenue dashboard endpoint.

Monetary values are Decimals (serialized as strings); nothing is
currency-formatted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from app.features.analytics.aggregator import RevenueDashboard


class TimeRange(str, Enum):
    """Trailing window selectable on the dashboard."""

    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    TWELVE_MONTHS = "12months"

    @property
    def months(self) -> int:
        """Window length in calendar months."""
        return int(self.value.removesuffix("months"))


class MonthBucketResponse(BaseModel):
    """Recognized revenue for one calendar month."""

    model_config = ConfigDict(from_attributes=True)

    label: str = Field(..., description='Month label, e.g. "Jan 2024".')
    revenue: Decimal = Field(..., description="Sum of paid/shipped order totals in the month.")
    order_count: int = Field(..., ge=0, description="Number of paid/shipped orders in the month.")


class CategorySalesResponse(BaseModel):
    """Share of line-item sales for one category."""

    model_config = ConfigDict(from_attributes=True)

    category: str
    sales: Decimal = Field(..., description="Sum of unit_price x quantity.")
    percentage: float = Field(
        ...,
        ge=0,
        description="Share of categorized sales (uncategorized lines are excluded).",
    )


class DashboardStatsResponse(BaseModel):
    """Summary cards."""

    model_config = ConfigDict(from_attributes=True)

    total_revenue: Decimal
    total_orders: int = Field(..., ge=0)
    total_products: int = Field(..., ge=0)
    average_order_value: Decimal = Field(..., description="0 when there are no orders.")
    revenue_growth: float = Field(
        ..., description="Percent change between the last two months (0 if undefined)."
    )
    order_growth: float = Field(
        ..., description="Percent change in order count between the last two months."
    )


class RevenueDashboardResponse(BaseModel):
    """Revenue dashboard payload."""

    model_config = ConfigDict(from_attributes=True)

    time_range: TimeRange
    months: list[MonthBucketResponse]
    category_sales: list[CategorySalesResponse]
    stats: DashboardStatsResponse
    generated_at: datetime

    @classmethod
    def from_dashboard(
        cls,
        dashboard: RevenueDashboard,
        time_range: TimeRange,
        generated_at: datetime,
    ) -> "RevenueDashboardResponse":
        """Wrap aggregator output for the API."""
        return cls(
            time_range=time_range,
            months=[MonthBucketResponse.model_validate(m) for m in dashboard.months],
            category_sales=[
                CategorySalesResponse.model_validate(c) for c in dashboard.category_sales
            ],
            stats=DashboardStatsResponse.model_validate(dashboard.stats),
            generated_at=generated_at,
        )
