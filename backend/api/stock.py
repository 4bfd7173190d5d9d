"""Stock & movement endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status

from backend.api.errors import to_http_exception
from backend.dependencies.security import get_session_context
from backend.dependencies.services import get_movement_service
from backend.schemas.stock import (
    MovementCreate,
    MovementOut,
    MovementResponse,
    RecentMovementsResponse,
    StockAdjustmentRequest,
)
from core.inventory_service import StockMovementService
from core.product_service import InventoryError
from core.session import SessionContext

router = APIRouter(tags=["stock"])


def _as_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@router.post(
    "/products/{product_id}/movements",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_movement(
    product_id: int,
    payload: MovementCreate,
    service: StockMovementService = Depends(get_movement_service),
    session: SessionContext = Depends(get_session_context),
):
    try:
        result = service.record_movement(
            product_id,
            payload.kind,
            payload.delta,
            reason=payload.reason,
            occurred_at=_as_naive_utc(payload.occurred_at),
            session=session,
        )
    except InventoryError as exc:
        raise to_http_exception(exc) from exc
    return MovementResponse.from_result(result)


@router.post("/stock/adjustments", response_model=MovementResponse)
def create_stock_adjustment(
    payload: StockAdjustmentRequest,
    service: StockMovementService = Depends(get_movement_service),
    session: SessionContext = Depends(get_session_context),
):
    try:
        result = service.adjust_stock_level(payload.product_id, payload.target_quantity, session=session)
    except InventoryError as exc:
        raise to_http_exception(exc) from exc
    return MovementResponse.from_result(result)


@router.get("/stock/movements/recent", response_model=RecentMovementsResponse)
def get_recent_movements(
    limit: int = Query(50, ge=1, le=500),
    product_id: int | None = Query(default=None),
    service: StockMovementService = Depends(get_movement_service),
    session: SessionContext = Depends(get_session_context),
):
    movements = service.list_recent_movements(limit=limit, product_id=product_id, session=session)
    return RecentMovementsResponse(items=[MovementOut.from_movement(item) for item in movements])
