"""Shared fixtures for the inventory core tests (in-memory SQLite)."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.catalog_sql_repository import SqlCatalogRepository  # noqa: E402
from core.inventory_schema import ensure_inventory_tables  # noqa: E402
from core.inventory_service import StockMovementService  # noqa: E402
from core.product_service import ProductCatalog  # noqa: E402
from core.repositories.stock_movements import SqlStockMovementRepository  # noqa: E402
from core.session import SessionContext  # noqa: E402


class FixedClock:
    """Callable clock that tests can move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def sqlite_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    ensure_inventory_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session() -> SessionContext:
    return SessionContext(user_id=1, username="ana")


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 15, 9, 30))


@pytest.fixture()
def catalog_repository(sqlite_engine) -> SqlCatalogRepository:
    return SqlCatalogRepository(sqlite_engine)


@pytest.fixture()
def movement_repository(sqlite_engine) -> SqlStockMovementRepository:
    return SqlStockMovementRepository(sqlite_engine)


@pytest.fixture()
def catalog(catalog_repository, clock) -> ProductCatalog:
    return ProductCatalog(catalog_repository, clock=clock)


@pytest.fixture()
def movement_service(movement_repository, clock) -> StockMovementService:
    return StockMovementService(movement_repository, clock=clock)
