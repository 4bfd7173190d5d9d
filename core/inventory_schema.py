"""Table definitions for the catalog and the stock movement ledger."""

from __future__ import annotations

import logging

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.engine import Engine

from .data_repository import get_engine
from .settings import AppSettings

logger = logging.getLogger(__name__)

metadata = MetaData()

NAME_MAX_LENGTH = 150
PRICE_PRECISION = 10
PRICE_SCALE = 2

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("description", Text, nullable=True),
    Column("category", String(32), nullable=False),
    Column("quantity", Integer, nullable=False, default=0),
    Column("min_stock", Integer, nullable=False, default=10),
    Column("price", Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False, default=0),
    # Naive UTC timestamps, identical on PostgreSQL and SQLite.
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

stock_movements = Table(
    "stock_movements",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("kind", String(16), nullable=False),
    Column("delta", Integer, nullable=False),
    Column("reason", Text, nullable=True),
    Column("recorded_by", String(150), nullable=True),
    Column("occurred_at", DateTime, nullable=False),
    Index("ix_stock_movements_occurred_at", "occurred_at"),
)


def ensure_inventory_tables(engine: Engine | None = None) -> None:
    """Create the products and stock_movements tables when missing."""

    if engine is None and AppSettings.load().skip_schema_init:
        return

    eng = engine or get_engine()
    metadata.create_all(eng, checkfirst=True)
    logger.info("Inventory tables ready on %s", eng.url.render_as_string(hide_password=True))


__all__ = [
    "NAME_MAX_LENGTH",
    "PRICE_PRECISION",
    "PRICE_SCALE",
    "metadata",
    "products",
    "stock_movements",
    "ensure_inventory_tables",
]
