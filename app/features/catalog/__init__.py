"""Catalog module: products and categories with admin CRUD."""

from app.features.catalog.models import Category, Product
from app.features.catalog.routes import router
from app.features.catalog.schemas import (
    CategoryResponse,
    CategoryWrite,
    ProductResponse,
    ProductWrite,
)
from app.features.catalog.service import CatalogService, parse_product_ref

__all__ = [
    "CatalogService",
    "Category",
    "CategoryResponse",
    "CategoryWrite",
    "Product",
    "ProductResponse",
    "ProductWrite",
    "parse_product_ref",
    "router",
]
