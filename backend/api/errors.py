"""Translate core inventory errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from core.product_service import InventoryError, ProductNotFoundError, ProductValidationError
from core.report_export import ReportRenderError


def to_http_exception(exc: InventoryError) -> HTTPException:
    if isinstance(exc, ProductValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": "Validation failed",
                "errors": [{"field": error.field, "message": error.message} for error in exc.errors],
            },
        )
    if isinstance(exc, ProductNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ReportRenderError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
