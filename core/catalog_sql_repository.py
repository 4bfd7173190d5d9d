from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from .catalog_repository import CatalogRepository, Product, ProductFilter
from .data_repository import get_engine, query_df
from .inventory_schema import products

_WRITABLE_COLUMNS = ("name", "description", "category", "quantity", "min_stock", "price")


def _to_datetime(value: Any) -> datetime:
    # pandas hands back Timestamps for datetime columns.
    if hasattr(value, "to_pydatetime"):
        return value.to_pydatetime()
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def _row_to_product(row: Mapping[str, Any]) -> Product:
    description = row.get("description")
    return Product(
        id=int(row["id"]),
        name=str(row["name"]),
        description=description if isinstance(description, str) else None,
        category=str(row["category"]),
        quantity=int(row["quantity"]),
        min_stock=int(row["min_stock"]),
        price=Decimal(str(row["price"])).quantize(Decimal("0.01")),
        created_at=_to_datetime(row["created_at"]),
        updated_at=_to_datetime(row["updated_at"]),
    )


class SqlCatalogRepository(CatalogRepository):
    """Product store backed by the ``products`` table."""

    def __init__(self, engine: Engine | None = None):
        self._engine = engine or get_engine()

    def get_by_id(self, product_id: int) -> Product | None:
        stmt = select(products).where(products.c.id == int(product_id))
        df = query_df(stmt, engine=self._engine)
        if df.empty:
            return None
        return _row_to_product(df.iloc[0].to_dict())

    def list_all(self, product_filter: ProductFilter | None = None) -> list[Product]:
        stmt = select(products)
        if product_filter is not None:
            if product_filter.category is not None:
                stmt = stmt.where(products.c.category == product_filter.category)
            if product_filter.min_quantity is not None:
                stmt = stmt.where(products.c.quantity >= int(product_filter.min_quantity))
            if product_filter.max_quantity is not None:
                stmt = stmt.where(products.c.quantity <= int(product_filter.max_quantity))
        stmt = stmt.order_by(products.c.id.asc())

        df = query_df(stmt, engine=self._engine)
        items = [_row_to_product(record) for record in df.to_dict("records")]
        if product_filter is None:
            return items
        # Name matching stays in Python so case folding is the same on every dialect.
        return [item for item in items if product_filter.matches(item)]

    def add(self, values: Mapping[str, Any], *, now: datetime) -> Product:
        payload = {column: values.get(column) for column in _WRITABLE_COLUMNS}
        payload.update({"created_at": now, "updated_at": now})
        with self._engine.begin() as conn:
            result = conn.execute(insert(products).values(**payload))
            product_id = result.inserted_primary_key[0]
        created = self.get_by_id(product_id)
        if created is None:
            raise RuntimeError(f"Product {product_id} vanished right after insert")
        return created

    def update(self, product_id: int, values: Mapping[str, Any], *, now: datetime) -> Product | None:
        changes = {column: values[column] for column in _WRITABLE_COLUMNS if column in values}
        changes["updated_at"] = now
        with self._engine.begin() as conn:
            result = conn.execute(
                update(products).where(products.c.id == int(product_id)).values(**changes)
            )
            if result.rowcount == 0:
                return None
        return self.get_by_id(product_id)


__all__ = ["SqlCatalogRepository"]
