"""Tests for paging and money helpers."""

from decimal import Decimal

import pytest

from app.shared import PaginatedResponse, PaginationParams, quantize_money


class TestPaginationParams:
    def test_default_size_when_not_requested(self):
        params = PaginationParams.clamp(1, None, default=20, maximum=100)

        assert params.page_size == 20
        assert params.offset == 0

    def test_size_capped(self):
        assert PaginationParams.clamp(3, 500, default=20, maximum=100).page_size == 100

    def test_offset(self):
        assert PaginationParams(page=3, page_size=25).offset == 50


class TestPaginatedResponse:
    @pytest.mark.parametrize(("total", "pages"), [(0, 0), (1, 1), (20, 1), (21, 2)])
    def test_page_count(self, total: int, pages: int):
        page = PaginatedResponse[int].for_page([], total, PaginationParams(page=1, page_size=20))

        assert page.pages == pages
        assert page.total == total


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        ("1.005", "1.01"),
        ("1.004", "1.00"),
        ("2.5", "2.50"),
        ("0.125", "0.13"),
    ],
)
def test_quantize_money_rounds_half_up(amount: str, expected: str):
    assert quantize_money(Decimal(amount)) == Decimal(expected)
