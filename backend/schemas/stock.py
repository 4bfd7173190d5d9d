"""Schemas for stock movement endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from core.inventory_service import MovementResult
from core.repositories.stock_movements import StockMovement


class MovementCreate(BaseModel):
    kind: str = Field(..., description="entrada | saida")
    delta: int = Field(..., description="Units moved, >= 1")
    reason: Optional[str] = None
    occurred_at: Optional[datetime] = None


class MovementOut(BaseModel):
    id: int
    product_id: int
    kind: str
    delta: int
    reason: Optional[str] = None
    recorded_by: Optional[str] = None
    occurred_at: datetime

    @classmethod
    def from_movement(cls, movement: StockMovement) -> "MovementOut":
        return cls(
            id=movement.id,
            product_id=movement.product_id,
            kind=movement.kind.value,
            delta=movement.delta,
            reason=movement.reason,
            recorded_by=movement.recorded_by,
            occurred_at=movement.occurred_at,
        )


class RecentMovementsResponse(BaseModel):
    items: List[MovementOut]


class StockAdjustmentRequest(BaseModel):
    product_id: int = Field(..., gt=0)
    target_quantity: int


class MovementResponse(BaseModel):
    product_id: int
    product_name: str
    previous_quantity: int
    new_quantity: int
    movement_created: bool
    movement: Optional[MovementOut] = None

    @classmethod
    def from_result(cls, result: MovementResult) -> "MovementResponse":
        return cls(
            product_id=result.product_id,
            product_name=result.product_name,
            previous_quantity=result.previous_quantity,
            new_quantity=result.new_quantity,
            movement_created=result.movement_created,
            movement=MovementOut.from_movement(result.movement) if result.movement else None,
        )


__all__ = [
    "MovementCreate",
    "MovementOut",
    "MovementResponse",
    "RecentMovementsResponse",
    "StockAdjustmentRequest",
]
