from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.catalog_repository import Product


# Range and enum checks live in core.product_service so every violated field is
# reported together; the schemas only enforce JSON types.
class ProductCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: str
    quantity: int = 0
    min_stock: int = 10
    price: Decimal = Field(default=Decimal("0"))


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    min_stock: Optional[int] = None
    price: Optional[Decimal] = None

    model_config = ConfigDict(extra="forbid")


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str
    quantity: int
    min_stock: int
    price: float
    status: str = Field(description="low | medium | good")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        record = product.to_dict()
        record["price"] = float(product.price)
        return cls(**record)


__all__ = ["ProductCreate", "ProductUpdate", "ProductOut"]
