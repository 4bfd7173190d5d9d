"""
Repository layer for the stock movement ledger.
"""

from .stock_movements import (
    MovementKind,
    SqlStockMovementRepository,
    StockMovement,
    StockMovementRepository,
)

__all__ = [
    "MovementKind",
    "StockMovement",
    "StockMovementRepository",
    "SqlStockMovementRepository",
]
