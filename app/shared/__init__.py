"""Pieces shared by several shop features."""

from app.shared.models import TimestampMixin
from app.shared.schemas import PaginatedResponse, PaginationParams
from app.shared.utils import quantize_money

__all__ = [
    "PaginatedResponse",
    "PaginationParams",
    "TimestampMixin",
    "quantize_money",
]
