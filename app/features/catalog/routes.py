"""API routes for products and categories.

Reads are public; every mutation requires an admin token.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import DatabaseError, NotFoundError
from app.core.logging import get_logger
from app.features.auth.deps import require_admin
from app.features.catalog.schemas import (
    CategoryResponse,
    CategoryWrite,
    ProductResponse,
    ProductWrite,
)
from app.features.catalog.service import CatalogService, parse_product_ref
from app.shared.schemas import PaginatedResponse, PaginationParams

logger = get_logger(__name__)

router = APIRouter(tags=["catalog"])


def _product_not_found(product_ref: str) -> NotFoundError:
    return NotFoundError(
        f"Product not found: {product_ref}. Use GET /products to list available products.",
        details={"product_ref": product_ref},
    )


def _category_not_found(category_id: int) -> NotFoundError:
    return NotFoundError(
        f"Category not found: {category_id}. Use GET /categories to list categories.",
        details={"category_id": category_id},
    )


# =============================================================================
# Product Endpoints
# =============================================================================


@router.get(
    "/products",
    response_model=PaginatedResponse[ProductResponse],
    summary="List products",
    description="""
List catalog products ordered by name.

**Filtering Options**:
- `category_id`: Only products in this category
- `featured`: Only featured (true) or non-featured (false) products
- `search`: Case-insensitive substring match on the product name

**Pagination**: 1-indexed `page`, `page_size` up to the configured maximum.
""",
)
async def list_products(
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int | None = Query(None, ge=1, description="Products per page"),
    category_id: int | None = Query(None, description="Filter by category ID"),
    featured: bool | None = Query(None, description="Filter by featured flag"),
    search: str | None = Query(None, min_length=2, description="Search in product name"),
) -> PaginatedResponse[ProductResponse]:
    """List products with pagination and filtering."""
    settings = get_settings()
    return await CatalogService().list_products(
        db=db,
        pagination=PaginationParams.clamp(
            page,
            page_size,
            default=settings.catalog_default_page_size,
            maximum=settings.catalog_max_page_size,
        ),
        category_id=category_id,
        featured=featured,
        search=search,
    )


@router.get(
    "/products/{product_ref}",
    response_model=ProductResponse,
    summary="Get product by numeric ID or UUID",
)
async def get_product(
    product_ref: str,
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """Get product details.

    Raises:
        BadRequestError: If product_ref is neither numeric nor a UUID.
        NotFoundError: If the product does not exist.
    """
    product = await CatalogService().get_product(db=db, product_ref=parse_product_ref(product_ref))
    if product is None:
        raise _product_not_found(product_ref)
    return ProductResponse.model_validate(product)


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    dependencies=[Depends(require_admin)],
)
async def create_product(
    request: ProductWrite,
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """Create a product (admin only)."""
    try:
        product = await CatalogService().create_product(db=db, data=request)
    except SQLAlchemyError as e:
        logger.error(
            "catalog.create_product_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to create product", details={"error": str(e)}) from e
    return ProductResponse.model_validate(product)


@router.put(
    "/products/{product_ref}",
    response_model=ProductResponse,
    summary="Replace a product",
    dependencies=[Depends(require_admin)],
)
async def update_product(
    product_ref: str,
    request: ProductWrite,
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """Update a product (admin only)."""
    ref = parse_product_ref(product_ref)
    try:
        product = await CatalogService().update_product(db=db, product_ref=ref, data=request)
    except SQLAlchemyError as e:
        logger.error(
            "catalog.update_product_failed",
            product_ref=product_ref,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to update product", details={"error": str(e)}) from e

    if product is None:
        raise _product_not_found(product_ref)
    return ProductResponse.model_validate(product)


@router.delete(
    "/products/{product_ref}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    dependencies=[Depends(require_admin)],
)
async def delete_product(
    product_ref: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a product (admin only)."""
    deleted = await CatalogService().delete_product(
        db=db, product_ref=parse_product_ref(product_ref)
    )
    if not deleted:
        raise _product_not_found(product_ref)


# =============================================================================
# Category Endpoints
# =============================================================================


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    summary="List categories",
)
async def list_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryResponse]:
    """List all categories ordered by name."""
    categories = await CatalogService().list_categories(db=db)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    dependencies=[Depends(require_admin)],
)
async def create_category(
    request: CategoryWrite,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Create a category (admin only).

    Raises:
        ConflictError: If the name is already taken.
    """
    category = await CatalogService().create_category(db=db, data=request)
    return CategoryResponse.model_validate(category)


@router.put(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Rename a category",
    dependencies=[Depends(require_admin)],
)
async def update_category(
    category_id: int,
    request: CategoryWrite,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Rename a category (admin only)."""
    category = await CatalogService().update_category(
        db=db, category_id=category_id, data=request
    )
    if category is None:
        raise _category_not_found(category_id)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    dependencies=[Depends(require_admin)],
)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete an unused category (admin only).

    Raises:
        ConflictError: If products still reference the category.
    """
    deleted = await CatalogService().delete_category(db=db, category_id=category_id)
    if not deleted:
        raise _category_not_found(category_id)
