"""Service layer for catalog operations.

Provides product and category CRUD. Products are always loaded with their
category so responses can carry ``category_name`` without lazy loads.
"""

import re
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.core.logging import get_logger
from app.features.catalog.models import Category, Product
from app.features.catalog.schemas import (
    CategoryWrite,
    ProductResponse,
    ProductWrite,
)
from app.shared.schemas import PaginatedResponse, PaginationParams

logger = get_logger(__name__)

_NUMERIC_ID = re.compile(r"^\d+$")


def parse_product_ref(product_ref: str) -> int | uuid.UUID:
    """Interpret a product path parameter as a numeric id or a UUID.

    Args:
        product_ref: Raw path segment.

    Returns:
        Integer id or UUID.

    Raises:
        BadRequestError: If the value is neither.
    """
    if _NUMERIC_ID.match(product_ref):
        return int(product_ref)
    try:
        return uuid.UUID(product_ref)
    except ValueError as e:
        raise BadRequestError(
            "Invalid id format. Must be numeric id or uuid.",
            details={"product_ref": product_ref},
        ) from e


class CatalogService:
    """Service for products and categories.

    All methods are async and use SQLAlchemy 2.0 style queries. Lookups
    return None when the row is missing; callers decide how to report it.
    """

    # =========================================================================
    # Products
    # =========================================================================

    async def list_products(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        category_id: int | None = None,
        featured: bool | None = None,
        search: str | None = None,
    ) -> PaginatedResponse[ProductResponse]:
        """List products with pagination and filtering.

        Args:
            db: Database session.
            pagination: Page and page size.
            category_id: Filter by category (exact match).
            featured: Filter by featured flag.
            search: Case-insensitive substring match on product name; `%` and
                `_` match literally.

        Returns:
            Paginated list of products ordered by name.
        """
        stmt = select(Product)

        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if featured is not None:
            stmt = stmt.where(Product.featured.is_(featured))
        if search:
            stmt = stmt.where(Product.name.icontains(search, autoescape=True))

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await db.execute(count_stmt)).scalar_one()

        stmt = (
            stmt.options(selectinload(Product.category))
            .order_by(Product.name, Product.id)
            .offset(pagination.offset)
            .limit(pagination.page_size)
        )
        products = (await db.execute(stmt)).scalars().all()

        logger.info(
            "catalog.products_listed",
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            filters={"category_id": category_id, "featured": featured, "search": search},
        )

        return PaginatedResponse[ProductResponse].for_page(
            [ProductResponse.model_validate(p) for p in products],
            total,
            pagination,
        )

    async def list_all_products(self, db: AsyncSession) -> list[Product]:
        """Load the full product snapshot with categories."""
        stmt = select(Product).options(selectinload(Product.category)).order_by(Product.id)
        return list((await db.execute(stmt)).scalars().all())

    async def get_product(
        self,
        db: AsyncSession,
        product_ref: int | uuid.UUID,
    ) -> Product | None:
        """Get a product by numeric id or UUID.

        Args:
            db: Database session.
            product_ref: Output of parse_product_ref.

        Returns:
            Product with category loaded, or None if not found.
        """
        column = Product.uuid if isinstance(product_ref, uuid.UUID) else Product.id
        stmt = (
            select(Product)
            .options(selectinload(Product.category))
            .where(column == product_ref)
        )
        return (await db.execute(stmt)).scalar_one_or_none()

    async def get_products_by_ids(
        self,
        db: AsyncSession,
        product_ids: set[int],
    ) -> dict[int, Product]:
        """Resolve a set of product ids to products (missing ids are absent)."""
        if not product_ids:
            return {}
        stmt = (
            select(Product)
            .options(selectinload(Product.category))
            .where(Product.id.in_(product_ids))
        )
        return {p.id: p for p in (await db.execute(stmt)).scalars().all()}

    async def create_product(self, db: AsyncSession, data: ProductWrite) -> Product:
        """Create a product.

        Raises:
            NotFoundError: If category_id refers to a missing category.
        """
        await self._ensure_category(db, data.category_id)

        product = Product(**data.model_dump())
        db.add(product)
        await db.flush()
        await self._reload(db, product)

        logger.info("catalog.product_created", product_id=product.id, name=product.name)
        return product

    async def update_product(
        self,
        db: AsyncSession,
        product_ref: int | uuid.UUID,
        data: ProductWrite,
    ) -> Product | None:
        """Replace a product's editable fields.

        Returns:
            Updated product, or None if not found.

        Raises:
            NotFoundError: If category_id refers to a missing category.
        """
        product = await self.get_product(db, product_ref)
        if product is None:
            return None

        await self._ensure_category(db, data.category_id)

        for field_name, value in data.model_dump().items():
            setattr(product, field_name, value)
        await db.flush()
        await self._reload(db, product)

        logger.info("catalog.product_updated", product_id=product.id)
        return product

    async def delete_product(self, db: AsyncSession, product_ref: int | uuid.UUID) -> bool:
        """Delete a product.

        Returns:
            True if deleted, False if not found.
        """
        product = await self.get_product(db, product_ref)
        if product is None:
            return False

        await db.delete(product)
        await db.flush()

        logger.info("catalog.product_deleted", product_id=product.id)
        return True

    # =========================================================================
    # Categories
    # =========================================================================

    async def list_categories(self, db: AsyncSession) -> list[Category]:
        """List all categories ordered by name."""
        stmt = select(Category).order_by(Category.name)
        return list((await db.execute(stmt)).scalars().all())

    async def get_category(self, db: AsyncSession, category_id: int) -> Category | None:
        """Get a category by id."""
        return await db.get(Category, category_id)

    async def create_category(self, db: AsyncSession, data: CategoryWrite) -> Category:
        """Create a category.

        Raises:
            ConflictError: If the name is already taken.
        """
        await self._ensure_unique_category_name(db, data.name)

        category = Category(name=data.name)
        db.add(category)
        await db.flush()
        await db.refresh(category)

        logger.info("catalog.category_created", category_id=category.id, name=category.name)
        return category

    async def update_category(
        self,
        db: AsyncSession,
        category_id: int,
        data: CategoryWrite,
    ) -> Category | None:
        """Rename a category.

        Returns:
            Updated category, or None if not found.

        Raises:
            ConflictError: If another category already uses the name.
        """
        category = await self.get_category(db, category_id)
        if category is None:
            return None

        if category.name != data.name:
            await self._ensure_unique_category_name(db, data.name)
            category.name = data.name
            await db.flush()
            await db.refresh(category)

        logger.info("catalog.category_updated", category_id=category.id)
        return category

    async def delete_category(self, db: AsyncSession, category_id: int) -> bool:
        """Delete a category that no product references.

        Returns:
            True if deleted, False if not found.

        Raises:
            ConflictError: If products still belong to the category.
        """
        category = await self.get_category(db, category_id)
        if category is None:
            return False

        in_use_stmt = select(func.count()).where(Product.category_id == category_id)
        in_use = (await db.execute(in_use_stmt)).scalar_one()
        if in_use:
            raise ConflictError(
                f"Category {category_id} is still assigned to {in_use} product(s)",
                details={"category_id": category_id, "product_count": in_use},
            )

        await db.delete(category)
        await db.flush()

        logger.info("catalog.category_deleted", category_id=category_id)
        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _ensure_category(self, db: AsyncSession, category_id: int | None) -> None:
        if category_id is not None and await self.get_category(db, category_id) is None:
            raise NotFoundError(
                f"Category not found: {category_id}. Use GET /categories to list categories.",
                details={"category_id": category_id},
            )

    async def _ensure_unique_category_name(self, db: AsyncSession, name: str) -> None:
        stmt = select(Category.id).where(func.lower(Category.name) == name.lower())
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(
                f"Category already exists: {name}",
                details={"name": name},
            )

    async def _reload(self, db: AsyncSession, product: Product) -> None:
        await db.refresh(product)
        await db.refresh(product, attribute_names=["category"])
