"""Catalog value types and the store interface (injection friendly)."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Protocol

from .stock_status import StockStatus, classify


class Category(str, Enum):
    FOOD = "Food"
    BEVERAGES = "Beverages"
    CLEANING = "Cleaning"
    HYGIENE = "Hygiene"
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    OTHER = "Other"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @classmethod
    def parse(cls, value: Any) -> "Category | None":
        """Exact, case-sensitive lookup; None when the value is not a category."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class Product:
    id: int
    name: str
    description: str | None
    category: str
    quantity: int
    min_stock: int
    price: Decimal
    created_at: datetime
    updated_at: datetime

    @property
    def status(self) -> StockStatus:
        return classify(self.quantity, self.min_stock)

    @property
    def total_value(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        record = asdict(self)
        record["status"] = self.status.value
        return record


@dataclass
class ProductDraft:
    """Fields supplied by the caller when creating a product."""

    name: str
    category: str
    price: Decimal
    quantity: int = 0
    min_stock: int = 10
    description: str | None = None


@dataclass
class ProductChanges:
    """Partial update: every field is optional and ``None`` means unchanged."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    quantity: int | None = None
    min_stock: int | None = None
    price: Decimal | None = None

    def present(self) -> dict[str, Any]:
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not None
        }

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ProductChanges":
        known = {field.name for field in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"Unknown product fields: {', '.join(sorted(unknown))}")
        return cls(**values)


@dataclass(frozen=True)
class ProductFilter:
    """Listing filter; each ``None`` field imposes no constraint."""

    name: str | None = None
    category: str | None = None
    min_quantity: int | None = None
    max_quantity: int | None = None

    def is_empty(self) -> bool:
        return (
            not self.name
            and self.category is None
            and self.min_quantity is None
            and self.max_quantity is None
        )

    def matches(self, product: Product) -> bool:
        if self.name and self.name.casefold() not in product.name.casefold():
            return False
        if self.category is not None and product.category != self.category:
            return False
        if self.min_quantity is not None and product.quantity < self.min_quantity:
            return False
        if self.max_quantity is not None and product.quantity > self.max_quantity:
            return False
        return True


class CatalogRepository(Protocol):
    def get_by_id(self, product_id: int) -> Product | None:
        ...

    def list_all(self, product_filter: ProductFilter | None = None) -> list[Product]:
        """Products matching the filter, ascending id."""
        ...

    def add(self, values: Mapping[str, Any], *, now: datetime) -> Product:
        ...

    def update(self, product_id: int, values: Mapping[str, Any], *, now: datetime) -> Product | None:
        """Apply ``values`` and return the fresh row, or None when the id is unknown."""
        ...


__all__ = [
    "Category",
    "Product",
    "ProductDraft",
    "ProductChanges",
    "ProductFilter",
    "CatalogRepository",
]
