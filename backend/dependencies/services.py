"""Per-request construction of the core services (override in tests)."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.engine import Engine

from core.catalog_sql_repository import SqlCatalogRepository
from core.data_repository import get_engine
from core.inventory_service import StockMovementService
from core.inventory_stats import StatsAggregator
from core.product_service import ProductCatalog
from core.report_export import ReportExporter
from core.repositories.stock_movements import SqlStockMovementRepository


def get_db_engine() -> Engine:
    return get_engine()


def get_catalog(engine: Engine = Depends(get_db_engine)) -> ProductCatalog:
    return ProductCatalog(SqlCatalogRepository(engine))


def get_stats_aggregator(engine: Engine = Depends(get_db_engine)) -> StatsAggregator:
    return StatsAggregator(SqlCatalogRepository(engine), SqlStockMovementRepository(engine))


def get_report_exporter(engine: Engine = Depends(get_db_engine)) -> ReportExporter:
    return ReportExporter(SqlCatalogRepository(engine))


def get_movement_service(engine: Engine = Depends(get_db_engine)) -> StockMovementService:
    return StockMovementService(SqlStockMovementRepository(engine))
