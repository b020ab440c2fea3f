"""Immutable order/product snapshots consumed by the revenue aggregator.

This module is the ingestion boundary: ORM rows and raw JSON records (API
exports) are converted here, and every shape irregularity is resolved here.
Monetary fields are parsed into Decimal; an unparseable amount raises
InvalidAmountError and nothing downstream ever sees it.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from app.core.exceptions import ValidationError
from app.core.problem_details import ERROR_TYPES
from app.features.catalog.models import Product
from app.features.orders.models import Order


class InvalidAmountError(ValidationError):
    """A monetary field in a snapshot record could not be parsed."""

    error_type_uri: str = ERROR_TYPES["INVALID_AMOUNT"]

    def __init__(self, field: str, value: Any, record_id: Any = None) -> None:
        details: dict[str, Any] = {"field": field, "value": repr(value)}
        if record_id is not None:
            details["record_id"] = record_id
        super().__init__(
            message=f"Invalid monetary amount in '{field}': {value!r}",
            details=details,
        )
        self.code = "INVALID_AMOUNT"


@dataclass(frozen=True)
class CategoryRef:
    """Resolved product category."""

    id: int | None
    name: str


@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    category: CategoryRef | None = None


@dataclass(frozen=True)
class OrderLineSnapshot:
    product_id: int | None
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class OrderSnapshot:
    """Read-only view of an order as the aggregator needs it."""

    id: int
    status: str
    total_price: Decimal
    created_at: datetime
    items: tuple[OrderLineSnapshot, ...] = ()


# =============================================================================
# Field parsing
# =============================================================================


def parse_amount(value: Any, field: str, record_id: Any = None) -> Decimal:
    """Parse a monetary amount.

    Accepts Decimal, int, float and numeric strings. Floats go through their
    shortest repr so 19.99 stays 19.99.

    Raises:
        InvalidAmountError: For None, booleans, non-numeric strings, NaN or
            infinities.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(field, value, record_id)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise InvalidAmountError(field, value, record_id) from e
    else:
        raise InvalidAmountError(field, value, record_id)

    if not amount.is_finite():
        raise InvalidAmountError(field, value, record_id)
    return amount


def _invalid(field: str, value: Any, record_id: Any) -> ValidationError:
    details: dict[str, Any] = {"field": field, "value": repr(value)}
    if record_id is not None:
        details["record_id"] = record_id
    return ValidationError(f"Invalid {field}: {value!r}", details=details)


def _parse_int(value: Any, field: str, record_id: Any = None) -> int:
    """Parse a whole number (ids, quantities).

    Ints, integral floats and numeric strings are accepted, so 2, 2.0 and
    "2.0" all give 2; 2.9 and "2.9" are rejected rather than truncated.

    Raises:
        ValidationError: For None, booleans, fractions or anything non-numeric.
    """
    if isinstance(value, bool):
        raise _invalid(field, value, record_id)
    if isinstance(value, int):
        return value
    if not isinstance(value, (float, str, Decimal)):
        raise _invalid(field, value, record_id)
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise _invalid(field, value, record_id) from e
    if not number.is_finite() or number != number.to_integral_value():
        raise _invalid(field, value, record_id)
    return int(number)


def _require_mapping(value: Any, field: str, record_id: Any = None) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _invalid(field, value, record_id)
    return value


def _parse_timestamp(value: Any, record_id: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(
                f"Invalid created_at timestamp: {value!r}",
                details={"field": "created_at", "record_id": record_id},
            ) from e
    raise ValidationError(
        f"Invalid created_at timestamp: {value!r}",
        details={"field": "created_at", "record_id": record_id},
    )


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def resolve_category(
    raw: Any, category_id: Any = None, record_id: Any = None
) -> CategoryRef | None:
    """Collapse the loosely-typed category of a product record.

    ``raw`` may be a plain name, a mapping with ``name`` (and ``id``), or
    None. Blank names count as uncategorized.

    Raises:
        ValidationError: If the category id is not a whole number.
    """
    if isinstance(raw, Mapping):
        name = raw.get("name")
        category_id = raw.get("id", category_id)
    else:
        name = raw

    if not isinstance(name, str) or not name.strip():
        return None
    return CategoryRef(
        id=_parse_int(category_id, "category_id", record_id) if category_id is not None else None,
        name=name.strip(),
    )


# =============================================================================
# Raw records (JSON exports)
# =============================================================================


def product_from_record(record: Mapping[str, Any]) -> ProductSnapshot:
    """Build a product snapshot from an exported product record.

    Raises:
        ValidationError: If the record is not an object or its id or
            category id is missing or not a whole number.
    """
    record = _require_mapping(record, "product")
    product_id = _parse_int(record.get("id"), "id")
    raw_category = record.get("category")
    if raw_category is None:
        # flat exports carry only the name
        raw_category = _first(record, "categoryName", "category_name")
    return ProductSnapshot(
        id=product_id,
        category=resolve_category(
            raw_category, _first(record, "category_id", "categoryId"), record_id=product_id
        ),
    )


def order_from_record(record: Mapping[str, Any]) -> OrderSnapshot:
    """Build an order snapshot from an exported order record.

    Raises:
        InvalidAmountError: If total_price or any unit_price is malformed.
        ValidationError: If the id, a line's product_id or quantity, or
            created_at is malformed, or the record or a line is not an object.
    """
    record = _require_mapping(record, "order")
    order_id = _parse_int(record.get("id"), "id")
    raw_items = _first(record, "order_items", "orderItems", "items") or []
    if not isinstance(raw_items, (list, tuple)):
        raise _invalid("order_items", raw_items, order_id)

    items = []
    for raw in raw_items:
        raw = _require_mapping(raw, "order_items", order_id)
        product_id = _first(raw, "product_id", "productId")
        items.append(
            OrderLineSnapshot(
                product_id=(
                    _parse_int(product_id, "product_id", order_id)
                    if product_id is not None
                    else None
                ),
                quantity=_parse_int(raw.get("quantity"), "quantity", order_id),
                unit_price=parse_amount(
                    _first(raw, "unit_price", "unitPrice"), "unit_price", order_id
                ),
            )
        )

    return OrderSnapshot(
        id=order_id,
        status=str(record.get("status", "")).lower(),
        total_price=parse_amount(
            _first(record, "total_price", "totalPrice"), "total_price", order_id
        ),
        created_at=_parse_timestamp(_first(record, "created_at", "createdAt"), order_id),
        items=tuple(items),
    )


def orders_from_records(records: Iterable[Mapping[str, Any]]) -> list[OrderSnapshot]:
    return [order_from_record(r) for r in records]


def products_from_records(records: Iterable[Mapping[str, Any]]) -> list[ProductSnapshot]:
    return [product_from_record(r) for r in records]


# =============================================================================
# ORM rows
# =============================================================================


def product_from_model(product: Product) -> ProductSnapshot:
    """Snapshot a product; its category relationship must be loaded."""
    category = product.category
    return ProductSnapshot(
        id=product.id,
        category=CategoryRef(id=category.id, name=category.name) if category else None,
    )


def order_from_model(order: Order) -> OrderSnapshot:
    """Snapshot an order; its items relationship must be loaded."""
    return OrderSnapshot(
        id=order.id,
        status=order.status,
        total_price=parse_amount(order.total_price, "total_price", order.id),
        created_at=order.created_at,
        items=tuple(
            OrderLineSnapshot(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=parse_amount(item.unit_price, "unit_price", order.id),
            )
            for item in order.items
        ),
    )
