"""Reports API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from backend.api.errors import to_http_exception
from backend.dependencies.security import get_session_context
from backend.dependencies.services import get_report_exporter
from core.product_service import InventoryError
from core.report_export import ReportExporter
from core.session import SessionContext

router = APIRouter(tags=["reports"])


@router.get("/report")
def export_report(
    report_format: str = Query(default="pdf", alias="format", description="pdf | csv"),
    exporter: ReportExporter = Depends(get_report_exporter),
    session: SessionContext = Depends(get_session_context),
):
    """Download the full stock report as a file attachment."""

    try:
        payload = exporter.export(report_format, session=session)
    except InventoryError as exc:
        raise to_http_exception(exc) from exc

    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
    )
