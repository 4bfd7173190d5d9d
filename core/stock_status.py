"""Stock health classification shared by the catalog, the stats and the reports."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from fractions import Fraction

# Upper bound of the "attention" band, as a multiple of min_stock.
MEDIUM_FACTOR = Decimal("1.5")


class StockStatus(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    GOOD = "good"


def classify(quantity: int, min_stock: int) -> StockStatus:
    """Map a quantity and its reorder threshold to a status tier.

    ``quantity <= min_stock`` is low (equality included), anything up to
    ``min_stock * 1.5`` is medium and the rest is good. The medium bound is
    computed exactly, so ``min_stock=10`` gives 15 -> medium, 16 -> good.
    """

    if min_stock < 1:
        raise ValueError(f"min_stock must be >= 1, got {min_stock}")
    if quantity <= min_stock:
        return StockStatus.LOW
    if Decimal(quantity) <= Decimal(min_stock) * MEDIUM_FACTOR:
        return StockStatus.MEDIUM
    return StockStatus.GOOD


def stock_ratio(quantity: int, min_stock: int) -> Fraction:
    """Exact quantity / min_stock ratio; lower means more critical."""

    if min_stock < 1:
        raise ValueError(f"min_stock must be >= 1, got {min_stock}")
    return Fraction(quantity, min_stock)


__all__ = ["StockStatus", "classify", "stock_ratio", "MEDIUM_FACTOR"]
