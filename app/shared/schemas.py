"""Paging envelope shared by the catalog and order list endpoints."""

import math
from typing import Generic, Self, TypeVar

from pydantic import BaseModel, Field


class PaginationParams(BaseModel):
    """Resolved page window for a list query (1-indexed)."""

    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1)

    @classmethod
    def clamp(cls, page: int, page_size: int | None, default: int, maximum: int) -> Self:
        """Fill in ``default`` when no size was asked for and cap it at ``maximum``."""
        return cls(page=page, page_size=min(page_size or default, maximum))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus the totals a storefront pager needs."""

    items: list[T]
    total: int = Field(..., ge=0, description="Rows matching the filters, across all pages")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    pages: int = Field(..., ge=0)

    @classmethod
    def for_page(cls, items: list[T], total: int, pagination: PaginationParams) -> Self:
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            pages=math.ceil(total / pagination.page_size),
        )
