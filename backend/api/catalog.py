from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from backend.api.errors import to_http_exception
from backend.dependencies.security import get_session_context
from backend.dependencies.services import get_catalog
from backend.schemas.catalog import ProductCreate, ProductOut, ProductUpdate
from core.catalog_repository import ProductChanges, ProductDraft, ProductFilter
from core.product_service import InventoryError, ProductCatalog
from core.session import SessionContext

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductOut])
def list_products(
    name: str | None = None,
    category: str | None = None,
    min_quantity: int | None = Query(default=None, alias="min"),
    max_quantity: int | None = Query(default=None, alias="max"),
    catalog: ProductCatalog = Depends(get_catalog),
    session: SessionContext = Depends(get_session_context),
):
    product_filter = ProductFilter(
        name=name or None,
        category=category or None,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
    )
    try:
        items = catalog.list_products(product_filter, session=session)
    except InventoryError as exc:
        raise to_http_exception(exc) from exc
    return [ProductOut.from_product(item) for item in items]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    catalog: ProductCatalog = Depends(get_catalog),
    session: SessionContext = Depends(get_session_context),
):
    try:
        return ProductOut.from_product(catalog.get_product(product_id, session=session))
    except InventoryError as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    catalog: ProductCatalog = Depends(get_catalog),
    session: SessionContext = Depends(get_session_context),
):
    try:
        product = catalog.create_product(ProductDraft(**payload.model_dump()), session=session)
    except InventoryError as exc:
        raise to_http_exception(exc) from exc
    return ProductOut.from_product(product)


@router.put("/{product_id}", response_model=ProductOut)
@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    catalog: ProductCatalog = Depends(get_catalog),
    session: SessionContext = Depends(get_session_context),
):
    changes = ProductChanges.from_mapping(payload.model_dump(exclude_none=True))
    try:
        product = catalog.update_product(product_id, changes, session=session)
    except InventoryError as exc:
        raise to_http_exception(exc) from exc
    return ProductOut.from_product(product)
