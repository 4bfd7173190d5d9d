"""Minimal PDF writer for tabular reports (Helvetica, WinAnsi encoding)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

# A4 landscape, in points.
PAGE_WIDTH = 842
PAGE_HEIGHT = 595
MARGIN_X = 36
MARGIN_TOP = 40
MARGIN_BOTTOM = 40
LINE_HEIGHT = 14


class PdfEncodingError(ValueError):
    """Raised when a text value cannot be represented in the PDF font encoding."""


@dataclass(frozen=True)
class TableLayout:
    columns: Sequence[str]
    positions: Sequence[int]  # x offset of each column, from MARGIN_X
    font_size: int = 9


def format_money(amount: Decimal) -> str:
    safe_amount = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{safe_amount:.2f}"


def _escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("(", "\\(")
        .replace(")", "\\)")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )


def _encode_text(value: str) -> bytes:
    try:
        return _escape(value).encode("cp1252")
    except UnicodeEncodeError as exc:
        raise PdfEncodingError(f"Cannot encode {value!r} for the PDF font") from exc


def _text_op(font: str, size: int, x: int, y: int, value: str) -> bytes:
    return f"/{font} {size} Tf 1 0 0 1 {x} {y} Tm (".encode("ascii") + _encode_text(value) + b") Tj\n"


def _table_header(layout: TableLayout, y: int) -> list[bytes]:
    return [
        _text_op("F2", layout.font_size, MARGIN_X + x, y, label)
        for label, x in zip(layout.columns, layout.positions)
    ]


def _paginate(
    title: str,
    subtitle_lines: Sequence[str],
    layout: TableLayout,
    rows: Sequence[Sequence[str]],
    footer_lines: Sequence[str],
) -> list[bytes]:
    pages: list[list[bytes]] = []
    current: list[bytes] = []
    y = PAGE_HEIGHT - MARGIN_TOP

    current.append(_text_op("F2", 16, MARGIN_X, y, title))
    y -= LINE_HEIGHT + 8
    for line in subtitle_lines:
        current.append(_text_op("F1", 10, MARGIN_X, y, line))
        y -= LINE_HEIGHT
    y -= 6
    current.extend(_table_header(layout, y))
    y -= LINE_HEIGHT

    for row in rows:
        if y < MARGIN_BOTTOM:
            pages.append(current)
            current = []
            y = PAGE_HEIGHT - MARGIN_TOP
            current.extend(_table_header(layout, y))
            y -= LINE_HEIGHT
        for value, x in zip(row, layout.positions):
            current.append(_text_op("F1", layout.font_size, MARGIN_X + x, y, value))
        y -= LINE_HEIGHT

    y -= 6
    for line in footer_lines:
        if y < MARGIN_BOTTOM:
            pages.append(current)
            current = []
            y = PAGE_HEIGHT - MARGIN_TOP
        current.append(_text_op("F2", 10, MARGIN_X, y, line))
        y -= LINE_HEIGHT

    pages.append(current)
    return [b"BT\n" + b"".join(ops) + b"ET" for ops in pages]


def render_table_pdf(
    title: str,
    layout: TableLayout,
    rows: Sequence[Sequence[str]],
    *,
    subtitle_lines: Sequence[str] = (),
    footer_lines: Sequence[str] = (),
) -> bytes:
    """Encode a titled table into a self-contained PDF document."""

    streams = _paginate(title, subtitle_lines, layout, rows, footer_lines)

    # 1 catalog, 2 pages, 3-4 fonts, then one (page, contents) pair per page.
    page_numbers = [5 + 2 * index for index in range(len(streams))]
    kids = " ".join(f"{number} 0 R" for number in page_numbers)
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Count {len(streams)} /Kids [{kids}] >>".encode("ascii"),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold /Encoding /WinAnsiEncoding >>",
    ]
    for page_number, stream in zip(page_numbers, streams):
        objects.append(
            (
                f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
                f"/Resources << /Font << /F1 3 0 R /F2 4 0 R >> >> /Contents {page_number + 1} 0 R >>"
            ).encode("ascii")
        )
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"\nendstream"
        )

    parts: list[bytes] = [b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"]
    offsets: list[int] = []
    length = len(parts[0])
    for number, body in enumerate(objects, start=1):
        offsets.append(length)
        chunk = f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"
        parts.append(chunk)
        length += len(chunk)

    xref_offset = length
    total_objects = len(objects) + 1
    trailer = [f"xref\n0 {total_objects}\n", "0000000000 65535 f \n"]
    trailer.extend(f"{offset:010d} 00000 n \n" for offset in offsets)
    trailer.append(f"trailer\n<< /Size {total_objects} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF")
    parts.append("".join(trailer).encode("ascii"))
    return b"".join(parts)


__all__ = ["PdfEncodingError", "TableLayout", "format_money", "render_table_pdf"]
