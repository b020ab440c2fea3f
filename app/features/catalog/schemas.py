"""Pydantic schemas for catalog endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Category Schemas
# =============================================================================


class CategoryWrite(BaseModel):
    """Payload for creating or renaming a category."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Category display name.")


class CategoryResponse(BaseModel):
    """Category record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Product Schemas
# =============================================================================


class ProductWrite(BaseModel):
    """Payload for creating or fully replacing a product."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    image_url: str | None = Field(None, max_length=500)
    stock: int = Field(0, ge=0)
    featured: bool = False
    category_id: int | None = Field(
        None,
        description="Owning category. Null leaves the product uncategorized.",
    )

    @field_validator("image_url")
    @classmethod
    def blank_image_is_none(cls, v: str | None) -> str | None:
        """Treat an empty image URL as absent."""
        return v or None


class ProductResponse(BaseModel):
    """Product record with its resolved category name."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: uuid.UUID
    name: str
    description: str | None = None
    price: Decimal
    image_url: str | None = None
    stock: int
    featured: bool
    category_id: int | None = None
    category_name: str | None = Field(
        None,
        description="Name of the owning category, null when uncategorized.",
    )
    created_at: datetime
    updated_at: datetime
