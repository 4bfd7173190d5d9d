"""
Stock Movement Repository - Data access for the stock_movements ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, Engine

from core.data_repository import get_engine, query_df
from core.inventory_schema import products, stock_movements


class MovementKind(str, Enum):
    ENTRADA = "entrada"
    SAIDA = "saida"

    @property
    def sign(self) -> int:
        return 1 if self is MovementKind.ENTRADA else -1


@dataclass
class StockMovement:
    """Stock movement entity."""

    id: int | None
    product_id: int
    kind: MovementKind
    delta: int
    occurred_at: datetime
    reason: str | None = None
    recorded_by: str | None = None


class StockMovementRepository(Protocol):
    """Stock movement repository interface."""

    def list_between(self, start: datetime, end: datetime) -> Sequence[StockMovement]:
        """Movements with ``start <= occurred_at < end``."""
        ...

    def list_recent(self, *, limit: int = 50, product_id: int | None = None) -> Sequence[StockMovement]:
        ...

    def add(self, movement: StockMovement, *, conn: Connection | None = None) -> StockMovement:
        ...


def _to_datetime(value: Any) -> datetime:
    if hasattr(value, "to_pydatetime"):
        return value.to_pydatetime()
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


class SqlStockMovementRepository:
    """SQLAlchemy implementation of StockMovementRepository."""

    def __init__(self, engine: Engine | None = None):
        self._engine = engine or get_engine()

    @property
    def engine(self) -> Engine:
        return self._engine

    def list_between(self, start: datetime, end: datetime) -> Sequence[StockMovement]:
        stmt = (
            select(stock_movements)
            .where(stock_movements.c.occurred_at >= start)
            .where(stock_movements.c.occurred_at < end)
            .order_by(stock_movements.c.occurred_at.asc(), stock_movements.c.id.asc())
        )
        df = query_df(stmt, engine=self._engine)
        return [self._row_to_movement(row) for row in df.to_dict("records")]

    def list_recent(self, *, limit: int = 50, product_id: int | None = None) -> Sequence[StockMovement]:
        stmt = select(stock_movements)
        if product_id is not None:
            stmt = stmt.where(stock_movements.c.product_id == int(product_id))
        stmt = stmt.order_by(
            stock_movements.c.occurred_at.desc(), stock_movements.c.id.desc()
        ).limit(max(1, int(limit)))
        df = query_df(stmt, engine=self._engine)
        return [self._row_to_movement(row) for row in df.to_dict("records")]

    def add(self, movement: StockMovement, *, conn: Connection | None = None) -> StockMovement:
        """Append a movement; pass ``conn`` to join the caller's transaction."""

        params = {
            "product_id": movement.product_id,
            "kind": MovementKind(movement.kind).value,
            "delta": int(movement.delta),
            "reason": movement.reason,
            "recorded_by": movement.recorded_by,
            "occurred_at": movement.occurred_at,
        }
        if conn is not None:
            result = conn.execute(insert(stock_movements).values(**params))
        else:
            with self._engine.begin() as own_conn:
                result = own_conn.execute(insert(stock_movements).values(**params))
        movement.id = int(result.inserted_primary_key[0])
        return movement

    def apply_to_product(self, conn: Connection, product_id: int, quantity: int, now: datetime) -> None:
        conn.execute(
            update(products)
            .where(products.c.id == int(product_id))
            .values(quantity=int(quantity), updated_at=now)
        )

    def _row_to_movement(self, row: Mapping[str, Any]) -> StockMovement:
        reason = row.get("reason")
        recorded_by = row.get("recorded_by")
        return StockMovement(
            id=int(row["id"]),
            product_id=int(row["product_id"]),
            kind=MovementKind(row["kind"]),
            delta=int(row["delta"]),
            occurred_at=_to_datetime(row["occurred_at"]),
            reason=reason if isinstance(reason, str) else None,
            recorded_by=recorded_by if isinstance(recorded_by, str) else None,
        )
