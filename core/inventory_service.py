"""Stock movement write path: entries, exits and counted adjustments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection

from .inventory_schema import products
from .product_service import FieldError, ProductNotFoundError, ProductValidationError
from .repositories.stock_movements import MovementKind, SqlStockMovementRepository, StockMovement
from .session import SessionContext

logger = logging.getLogger(__name__)


@dataclass
class MovementResult:
    product_id: int
    product_name: str
    previous_quantity: int
    new_quantity: int
    movement: StockMovement | None = None

    @property
    def movement_created(self) -> bool:
        return self.movement is not None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class StockMovementService:
    """Records movements and applies them to the product quantity atomically.

    Movements are only written here. ``ProductCatalog.update_product`` edits
    the quantity field directly and never feeds the ledger.
    """

    def __init__(
        self,
        movements: SqlStockMovementRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._movements = movements
        self._clock = clock

    def _lock_product(self, conn: Connection, product_id: int) -> tuple[str, int]:
        row = conn.execute(
            select(products.c.name, products.c.quantity)
            .where(products.c.id == int(product_id))
            .with_for_update()
        ).fetchone()
        if row is None:
            raise ProductNotFoundError(product_id)
        return str(row.name), int(row.quantity)

    def _append(
        self,
        conn: Connection,
        product_id: int,
        current: int,
        kind: MovementKind,
        delta: int,
        *,
        reason: str | None,
        occurred_at: datetime,
        now: datetime,
        session: SessionContext,
    ) -> tuple[StockMovement, int]:
        """Insert the movement and move the product quantity; caller holds the row lock."""

        new_quantity = current + kind.sign * delta
        if new_quantity < 0:
            raise ProductValidationError(
                [FieldError("delta", f"exit of {delta} exceeds current stock of {current}")]
            )

        movement = self._movements.add(
            StockMovement(
                id=None,
                product_id=int(product_id),
                kind=kind,
                delta=delta,
                occurred_at=occurred_at,
                reason=reason,
                recorded_by=session.username,
            ),
            conn=conn,
        )
        self._movements.apply_to_product(conn, product_id, new_quantity, now)
        logger.info(
            "%s of %d on product %s by %s (%d -> %d)",
            kind.value,
            delta,
            product_id,
            session.username,
            current,
            new_quantity,
        )
        return movement, new_quantity

    def record_movement(
        self,
        product_id: int,
        kind: MovementKind | str,
        delta: int,
        *,
        reason: str | None = None,
        occurred_at: datetime | None = None,
        session: SessionContext,
    ) -> MovementResult:
        errors: list[FieldError] = []
        try:
            kind = MovementKind(kind)
        except ValueError:
            errors.append(FieldError("kind", "must be 'entrada' or 'saida'"))
        if not _is_int(delta) or delta < 1:
            errors.append(FieldError("delta", "must be an integer >= 1"))
        if errors:
            raise ProductValidationError(errors)

        now = self._clock()
        with self._movements.engine.begin() as conn:
            name, current = self._lock_product(conn, product_id)
            movement, new_quantity = self._append(
                conn,
                product_id,
                current,
                kind,
                delta,
                reason=reason,
                occurred_at=occurred_at or now,
                now=now,
                session=session,
            )

        return MovementResult(
            product_id=int(product_id),
            product_name=name,
            previous_quantity=current,
            new_quantity=new_quantity,
            movement=movement,
        )

    def adjust_stock_level(
        self,
        product_id: int,
        target_quantity: int,
        *,
        session: SessionContext,
    ) -> MovementResult:
        """Bring the stock to a counted quantity by recording the difference.

        The current quantity is read and the difference written under one row lock.
        """

        if not _is_int(target_quantity) or target_quantity < 0:
            raise ProductValidationError([FieldError("target_quantity", "must be an integer >= 0")])

        now = self._clock()
        with self._movements.engine.begin() as conn:
            name, current = self._lock_product(conn, product_id)
            delta = target_quantity - current
            if delta == 0:
                return MovementResult(
                    product_id=int(product_id),
                    product_name=name,
                    previous_quantity=current,
                    new_quantity=current,
                )

            movement, new_quantity = self._append(
                conn,
                product_id,
                current,
                MovementKind.ENTRADA if delta > 0 else MovementKind.SAIDA,
                abs(delta),
                reason=f"Stock adjustment ({session.username})",
                occurred_at=now,
                now=now,
                session=session,
            )

        return MovementResult(
            product_id=int(product_id),
            product_name=name,
            previous_quantity=current,
            new_quantity=new_quantity,
            movement=movement,
        )

    def list_recent_movements(
        self,
        *,
        limit: int = 50,
        product_id: int | None = None,
        session: SessionContext,
    ) -> Sequence[StockMovement]:
        return self._movements.list_recent(limit=limit, product_id=product_id)


__all__ = ["MovementResult", "StockMovementService"]
