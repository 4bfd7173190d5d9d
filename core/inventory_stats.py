"""Inventory statistics: totals, low stock, 6-month movement trend, category breakdown."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Sequence

import pandas as pd

from .catalog_repository import CatalogRepository, Category, Product
from .repositories.stock_movements import MovementKind, StockMovement, StockMovementRepository
from .session import SessionContext
from .stock_status import StockStatus, stock_ratio

logger = logging.getLogger(__name__)

TREND_MONTHS = 6
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class MonthlyMovement:
    month: str  # YYYY-MM
    label: str  # "Oct 2026"
    entradas: int = 0
    saidas: int = 0


@dataclass
class CategoryBreakdown:
    category: str
    count: int
    value: Decimal


@dataclass
class StatsSnapshot:
    total_products: int
    low_stock_products: int
    monthly_movements: list[MonthlyMovement] = field(default_factory=list)
    category_breakdown: list[CategoryBreakdown] = field(default_factory=list)
    low_stock_items: list[Product] = field(default_factory=list)


def month_window(as_of: date, months: int = TREND_MONTHS) -> list[tuple[int, int]]:
    """(year, month) pairs for the ``months`` calendar months ending at ``as_of``, oldest first."""

    anchor = as_of.year * 12 + (as_of.month - 1)
    return [divmod(anchor - offset, 12) for offset in range(months - 1, -1, -1)]


def window_bounds(as_of: date, months: int = TREND_MONTHS) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` datetime range covering the trend window."""

    keys = month_window(as_of, months)
    first_year, first_month0 = keys[0]
    last_year, last_month0 = divmod(as_of.year * 12 + as_of.month, 12)
    return datetime(first_year, first_month0 + 1, 1), datetime(last_year, last_month0 + 1, 1)


def _monthly_movements(movements: Sequence[StockMovement], as_of: date) -> list[MonthlyMovement]:
    keys = [(year, month0 + 1) for year, month0 in month_window(as_of)]
    month_keys = [f"{year:04d}-{month:02d}" for year, month in keys]
    kinds = [MovementKind.ENTRADA.value, MovementKind.SAIDA.value]

    if movements:
        df = pd.DataFrame(
            [
                {
                    "month": f"{movement.occurred_at.year:04d}-{movement.occurred_at.month:02d}",
                    "kind": MovementKind(movement.kind).value,
                    "delta": int(movement.delta),
                }
                for movement in movements
            ]
        )
        totals = (
            df.groupby(["month", "kind"])["delta"].sum().unstack("kind")
            .reindex(index=month_keys, columns=kinds)
            .fillna(0)
        )
    else:
        totals = pd.DataFrame(0, index=month_keys, columns=kinds)

    return [
        MonthlyMovement(
            month=key,
            label=f"{_MONTH_ABBR[month - 1]} {year}",
            entradas=int(totals.at[key, MovementKind.ENTRADA.value]),
            saidas=int(totals.at[key, MovementKind.SAIDA.value]),
        )
        for key, (year, month) in zip(month_keys, keys)
    ]


def _category_breakdown(products: Iterable[Product]) -> list[CategoryBreakdown]:
    counts: dict[str, int] = {}
    values: dict[str, Decimal] = {}
    for product in products:
        counts[product.category] = counts.get(product.category, 0) + 1
        values[product.category] = values.get(product.category, Decimal("0")) + product.total_value

    # Canonical category order first, anything unexpected afterwards by name.
    order = [name for name in Category.values() if name in counts]
    order += sorted(name for name in counts if name not in Category.values())
    return [CategoryBreakdown(category=name, count=counts[name], value=values[name]) for name in order]


def compute_stats(
    products: Sequence[Product],
    movements: Sequence[StockMovement],
    as_of: date,
) -> StatsSnapshot:
    """Pure aggregation over one catalog snapshot and the ledger rows."""

    low_items = sorted(
        (product for product in products if product.status is StockStatus.LOW),
        key=lambda product: (stock_ratio(product.quantity, product.min_stock), product.name, product.id),
    )
    return StatsSnapshot(
        total_products=len(products),
        low_stock_products=len(low_items),
        monthly_movements=_monthly_movements(movements, as_of),
        category_breakdown=_category_breakdown(products),
        low_stock_items=low_items,
    )


class StatsAggregator:
    """Reads the catalog and the ledger once per call; nothing is cached."""

    def __init__(self, catalog: CatalogRepository, movements: StockMovementRepository):
        self._catalog = catalog
        self._movements = movements

    def compute(self, as_of: date, *, session: SessionContext) -> StatsSnapshot:
        products = self._catalog.list_all()
        start, end = window_bounds(as_of)
        movements = self._movements.list_between(start, end)
        snapshot = compute_stats(products, movements, as_of)
        logger.debug(
            "Stats for %s computed for %s: %d products, %d low, %d movements",
            as_of.isoformat(),
            session.username,
            snapshot.total_products,
            snapshot.low_stock_products,
            len(movements),
        )
        return snapshot


__all__ = [
    "MonthlyMovement",
    "CategoryBreakdown",
    "StatsSnapshot",
    "StatsAggregator",
    "compute_stats",
    "month_window",
    "window_bounds",
]
