"""Inventory statistics for the dashboard charts."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from backend.dependencies.security import get_session_context
from backend.dependencies.services import get_stats_aggregator
from backend.schemas.dashboard import StatsResponse
from core.inventory_stats import StatsAggregator
from core.session import SessionContext

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    as_of: date | None = Query(default=None, description="Reference day; defaults to today"),
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
    session: SessionContext = Depends(get_session_context),
):
    """Totals, low stock, 6-month movement trend and category breakdown."""

    snapshot = aggregator.compute(as_of or date.today(), session=session)
    return StatsResponse.from_snapshot(snapshot)
