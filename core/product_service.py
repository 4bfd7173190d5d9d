"""Product catalog: validated create/update and filtered listing."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from .catalog_repository import (
    CatalogRepository,
    Category,
    Product,
    ProductChanges,
    ProductDraft,
    ProductFilter,
)
from .inventory_schema import NAME_MAX_LENGTH, PRICE_PRECISION, PRICE_SCALE
from .session import SessionContext

logger = logging.getLogger(__name__)

_PRICE_STEP = Decimal(1).scaleb(-PRICE_SCALE)
_PRICE_LIMIT = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


class InventoryError(Exception):
    """Base exception for inventory operations."""


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class ProductValidationError(InventoryError):
    """Raised when one or more fields break their constraints."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        summary = "; ".join(f"{error.field}: {error.message}" for error in self.errors)
        super().__init__(f"Invalid product data ({summary})")

    @property
    def fields(self) -> list[str]:
        return [error.field for error in self.errors]


class ProductNotFoundError(InventoryError):
    """Raised when a product id is unknown to the store."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_name(value: Any) -> tuple[str | None, str | None]:
    if not isinstance(value, str) or not value.strip():
        return None, "must not be empty"
    name = value.strip()
    if len(name) > NAME_MAX_LENGTH:
        return None, f"must be at most {NAME_MAX_LENGTH} characters"
    return name, None


def _check_category(value: Any) -> tuple[str | None, str | None]:
    category = Category.parse(value)
    if category is None:
        return None, f"must be one of {', '.join(Category.values())}"
    return category.value, None


def _check_quantity(value: Any) -> tuple[int | None, str | None]:
    if not _is_int(value) or value < 0:
        return None, "must be an integer >= 0"
    return value, None


def _check_min_stock(value: Any) -> tuple[int | None, str | None]:
    if not _is_int(value) or value < 1:
        return None, "must be an integer >= 1"
    return value, None


def _check_price(value: Any) -> tuple[Decimal | None, str | None]:
    if isinstance(value, bool):
        return None, "must be a number >= 0"
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None, "must be a number >= 0"
    if not price.is_finite() or price < 0:
        return None, "must be a number >= 0"
    if price >= _PRICE_LIMIT:
        return None, f"must be lower than {_PRICE_LIMIT}"
    if price != price.quantize(_PRICE_STEP):
        return None, f"must have at most {PRICE_SCALE} decimal places"
    return price.quantize(_PRICE_STEP), None


def _check_description(value: Any) -> tuple[str | None, str | None]:
    if value is None:
        return None, None
    if not isinstance(value, str):
        return None, "must be text"
    return value, None


_CHECKS: dict[str, Callable[[Any], tuple[Any, str | None]]] = {
    "name": _check_name,
    "description": _check_description,
    "category": _check_category,
    "quantity": _check_quantity,
    "min_stock": _check_min_stock,
    "price": _check_price,
}


def validate_fields(values: dict[str, Any]) -> dict[str, Any]:
    """Validate every supplied field and return the cleaned values.

    All violations are collected before raising so the caller can fix them
    in one round trip.
    """

    cleaned: dict[str, Any] = {}
    errors: list[FieldError] = []
    for field, value in values.items():
        check = _CHECKS.get(field)
        if check is None:
            errors.append(FieldError(field, "unknown field"))
            continue
        result, message = check(value)
        if message is not None:
            errors.append(FieldError(field, message))
        else:
            cleaned[field] = result
    if errors:
        raise ProductValidationError(errors)
    return cleaned


class ProductCatalog:
    """CRUD and filtered listing over the product store (no delete)."""

    def __init__(self, repository: CatalogRepository, *, clock: Callable[[], datetime] = _utcnow):
        self._repository = repository
        self._clock = clock

    def list_products(
        self,
        product_filter: ProductFilter | None = None,
        *,
        session: SessionContext,
    ) -> list[Product]:
        product_filter = product_filter or ProductFilter()
        if product_filter.category is not None and Category.parse(product_filter.category) is None:
            raise ProductValidationError(
                [FieldError("category", f"must be one of {', '.join(Category.values())}")]
            )
        if (
            product_filter.min_quantity is not None
            and product_filter.max_quantity is not None
            and product_filter.min_quantity > product_filter.max_quantity
        ):
            return []

        items = self._repository.list_all(None if product_filter.is_empty() else product_filter)
        logger.debug("User %s listed %d products", session.username, len(items))
        return items

    def get_product(self, product_id: int, *, session: SessionContext) -> Product:
        product = self._repository.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def create_product(self, draft: ProductDraft, *, session: SessionContext) -> Product:
        try:
            values = validate_fields(asdict(draft))
        except ProductValidationError as exc:
            logger.warning("Rejected product creation by %s: %s", session.username, exc)
            raise
        product = self._repository.add(values, now=self._clock())
        logger.info("Product %s (%s) created by %s", product.id, product.name, session.username)
        return product

    def update_product(
        self,
        product_id: int,
        changes: ProductChanges,
        *,
        session: SessionContext,
    ) -> Product:
        present = changes.present()
        if not present:
            return self.get_product(product_id, session=session)

        if self._repository.get_by_id(product_id) is None:
            raise ProductNotFoundError(product_id)
        try:
            values = validate_fields(present)
        except ProductValidationError as exc:
            logger.warning("Rejected update of product %s by %s: %s", product_id, session.username, exc)
            raise

        # No version check: concurrent updates resolve to whichever write lands last.
        product = self._repository.update(product_id, values, now=self._clock())
        if product is None:
            raise ProductNotFoundError(product_id)
        logger.info(
            "Product %s updated by %s (fields: %s)",
            product_id,
            session.username,
            ", ".join(sorted(values)),
        )
        return product


__all__ = [
    "InventoryError",
    "FieldError",
    "ProductValidationError",
    "ProductNotFoundError",
    "ProductCatalog",
    "validate_fields",
]
