"""Route tests for the revenue dashboard endpoint."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.core.config import get_settings
from app.features.analytics.schemas import (
    DashboardStatsResponse,
    MonthBucketResponse,
    RevenueDashboardResponse,
    TimeRange,
)
from app.features.analytics.service import AnalyticsService
from app.features.analytics.snapshot import InvalidAmountError

URL = "/analytics/revenue-dashboard"


def _dashboard(time_range: TimeRange) -> RevenueDashboardResponse:
    return RevenueDashboardResponse(
        time_range=time_range,
        months=[
            MonthBucketResponse(label="Feb 2024", revenue=Decimal("200.00"), order_count=1),
            MonthBucketResponse(label="Mar 2024", revenue=Decimal("300.00"), order_count=1),
        ],
        category_sales=[],
        stats=DashboardStatsResponse(
            total_revenue=Decimal("500.00"),
            total_orders=2,
            total_products=3,
            average_order_value=Decimal("250.00"),
            revenue_growth=50.0,
            order_growth=0.0,
        ),
        generated_at=datetime(2024, 3, 15, tzinfo=UTC),
    )


@pytest.fixture
def default_range(monkeypatch):
    def _set(value: str) -> None:
        monkeypatch.setenv("ANALYTICS_DEFAULT_TIME_RANGE", value)
        get_settings.cache_clear()

    yield _set
    get_settings.cache_clear()


class TestRevenueDashboardAccess:
    async def test_requires_login(self, client: AsyncClient):
        response = await client.get(URL)

        assert response.status_code == 401

    async def test_customer_forbidden(self, client: AsyncClient, login_as, customer):
        login_as(customer)

        response = await client.get(URL)

        assert response.status_code == 403


class TestRevenueDashboardEndpoint:
    async def test_returns_dashboard(self, client: AsyncClient, login_as, admin_user):
        login_as(admin_user)
        mock = AsyncMock(return_value=_dashboard(TimeRange.TWELVE_MONTHS))

        with patch.object(AnalyticsService, "get_revenue_dashboard", new=mock):
            response = await client.get(URL, params={"time_range": "12months"})

        assert response.status_code == 200
        body = response.json()
        assert body["time_range"] == "12months"
        assert body["months"][1] == {"label": "Mar 2024", "revenue": "300.00", "order_count": 1}
        assert body["stats"]["average_order_value"] == "250.00"
        assert body["stats"]["revenue_growth"] == 50.0
        assert mock.await_args.kwargs["time_range"] is TimeRange.TWELVE_MONTHS

    async def test_default_range_from_settings(
        self, client: AsyncClient, login_as, admin_user, default_range
    ):
        default_range("3months")
        login_as(admin_user)
        mock = AsyncMock(return_value=_dashboard(TimeRange.THREE_MONTHS))

        with patch.object(AnalyticsService, "get_revenue_dashboard", new=mock):
            response = await client.get(URL)

        assert response.status_code == 200
        assert mock.await_args.kwargs["time_range"] is TimeRange.THREE_MONTHS

    async def test_unknown_range_rejected(self, client: AsyncClient, login_as, admin_user):
        login_as(admin_user)

        response = await client.get(URL, params={"time_range": "24months"})

        assert response.status_code == 422
        assert response.headers["content-type"] == "application/problem+json"

    async def test_malformed_amount_is_problem(self, client: AsyncClient, login_as, admin_user):
        login_as(admin_user)
        error = InvalidAmountError("total_price", "ten", record_id=42)

        with patch.object(
            AnalyticsService, "get_revenue_dashboard", new=AsyncMock(side_effect=error)
        ):
            response = await client.get(URL)

        assert response.status_code == 422
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["code"] == "INVALID_AMOUNT"
        assert body["type"].endswith("/invalid-amount")
        assert body["details"]["field"] == "total_price"
        assert body["details"]["record_id"] == 42
