"""Catalog ORM models: categories and products.

A product optionally belongs to one category. Products are addressable both
by their integer primary key and by a stable public UUID.
"""

from uuid import UUID, uuid4
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import TimestampMixin


class Category(TimestampMixin, Base):
    """Product category.

    Attributes:
        id: Primary key.
        name: Unique display name (e.g., "Rackets", "Shoes").
    """

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    products: Mapped[list["Product"]] = relationship(back_populates="category")


class Product(TimestampMixin, Base):
    """Sellable catalog item.

    Attributes:
        id: Integer primary key.
        uuid: Public identifier, accepted wherever a product id is.
        name: Display name.
        description: Long description (optional).
        price: Current unit price.
        image_url: Product image (optional).
        stock: Units on hand as last entered by an admin.
        featured: Shown on the storefront landing page.
        category_id: Owning category (nullable; products may be uncategorized).
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    uuid: Mapped[UUID] = mapped_column(
        Uuid, unique=True, index=True, default=uuid4
    )
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    stock: Mapped[int] = mapped_column(Integer, default=0)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("category.id", ondelete="RESTRICT"), index=True, nullable=True
    )

    category: Mapped["Category | None"] = relationship(back_populates="products")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_positive"),
        CheckConstraint("stock >= 0", name="ck_product_stock_positive"),
    )

    @property
    def category_name(self) -> str | None:
        """Name of the owning category, if loaded and present."""
        return self.category.name if self.category is not None else None
