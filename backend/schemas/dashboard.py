"""Pydantic schemas for the inventory statistics endpoint."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from backend.schemas.catalog import ProductOut
from core.inventory_stats import StatsSnapshot


class MonthlyMovementEntry(BaseModel):
    month: str = Field(description="YYYY-MM")
    label: str
    entradas: int = Field(0, ge=0)
    saidas: int = Field(0, ge=0)


class CategoryBreakdownEntry(BaseModel):
    category: str
    count: int = Field(0, ge=0)
    value: float


class StatsResponse(BaseModel):
    total_products: int = Field(0, ge=0)
    low_stock_products: int = Field(0, ge=0)
    monthly_movements: List[MonthlyMovementEntry]
    category_breakdown: List[CategoryBreakdownEntry]
    low_stock_items: List[ProductOut]

    @classmethod
    def from_snapshot(cls, snapshot: StatsSnapshot) -> "StatsResponse":
        return cls(
            total_products=snapshot.total_products,
            low_stock_products=snapshot.low_stock_products,
            monthly_movements=[
                MonthlyMovementEntry(
                    month=entry.month,
                    label=entry.label,
                    entradas=entry.entradas,
                    saidas=entry.saidas,
                )
                for entry in snapshot.monthly_movements
            ],
            category_breakdown=[
                CategoryBreakdownEntry(category=entry.category, count=entry.count, value=float(entry.value))
                for entry in snapshot.category_breakdown
            ],
            low_stock_items=[ProductOut.from_product(product) for product in snapshot.low_stock_items],
        )


__all__ = ["StatsResponse"]
