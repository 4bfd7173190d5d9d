"""Stock report export: one catalog snapshot encoded as CSV or PDF."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, Sequence

import pandas as pd

from .catalog_repository import CatalogRepository, Product
from .pdf_utils import PdfEncodingError, TableLayout, format_money, render_table_pdf
from .product_service import FieldError, InventoryError, ProductValidationError
from .session import SessionContext

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ("name", "category", "quantity", "min_stock", "price", "total_value")
REPORT_BASENAME = "relatorio_estoque"
REPORT_TITLE = "Relatório de Estoque - StockWise"

_PDF_LAYOUT = TableLayout(columns=REPORT_COLUMNS, positions=(0, 300, 410, 480, 560, 660))


class ReportRenderError(InventoryError):
    """Raised when a report cannot be serialized; no partial payload is returned."""


class ReportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"

    @property
    def media_type(self) -> str:
        return "text/csv" if self is ReportFormat.CSV else "application/pdf"


@dataclass(frozen=True)
class ReportPayload:
    filename: str
    media_type: str
    content: bytes


def parse_format(value: str | ReportFormat) -> ReportFormat:
    raw = value.value if isinstance(value, ReportFormat) else str(value)
    try:
        return ReportFormat(raw.strip().lower())
    except ValueError as exc:
        raise ProductValidationError([FieldError("format", "must be 'csv' or 'pdf'")]) from exc


def build_report_rows(products: Sequence[Product]) -> list[list[str]]:
    """The logical report table shared by both encodings, one row per product."""

    return [
        [
            product.name,
            product.category,
            str(product.quantity),
            str(product.min_stock),
            format_money(product.price),
            format_money(product.total_value),
        ]
        for product in products
    ]


def render_csv(rows: Sequence[Sequence[str]]) -> bytes:
    """RFC 4180 CSV: minimal quoting with doubled quotes, CRLF line endings."""

    frame = pd.DataFrame(list(rows), columns=list(REPORT_COLUMNS), dtype=object)
    return frame.to_csv(index=False, lineterminator="\r\n").encode("utf-8")


def render_pdf(rows: Sequence[Sequence[str]], products: Sequence[Product], generated_at: datetime) -> bytes:
    grand_total = sum((product.total_value for product in products), Decimal("0"))
    return render_table_pdf(
        REPORT_TITLE,
        _PDF_LAYOUT,
        rows,
        subtitle_lines=[f"Gerado em: {generated_at:%d/%m/%Y %H:%M}"],
        footer_lines=[f"Total Geral: {format_money(grand_total)}"],
    )


class ReportExporter:
    def __init__(self, catalog: CatalogRepository, *, clock: Callable[[], datetime] = datetime.now):
        self._catalog = catalog
        self._clock = clock

    def export(self, report_format: str | ReportFormat, *, session: SessionContext) -> ReportPayload:
        fmt = parse_format(report_format)
        products = self._catalog.list_all()
        rows = build_report_rows(products)

        try:
            if fmt is ReportFormat.CSV:
                content = render_csv(rows)
            else:
                content = render_pdf(rows, products, self._clock())
        except (PdfEncodingError, UnicodeError) as exc:
            logger.exception("Report export (%s) failed for %s", fmt.value, session.username)
            raise ReportRenderError(f"Unable to render {fmt.value} report: {exc}") from exc

        logger.info(
            "Report %s exported by %s (%d products, %d bytes)",
            fmt.value,
            session.username,
            len(products),
            len(content),
        )
        return ReportPayload(
            filename=f"{REPORT_BASENAME}.{fmt.value}",
            media_type=fmt.media_type,
            content=content,
        )


__all__ = [
    "REPORT_COLUMNS",
    "ReportExporter",
    "ReportFormat",
    "ReportPayload",
    "ReportRenderError",
    "build_report_rows",
    "parse_format",
    "render_csv",
    "render_pdf",
]
