"""
Report export -- write ``to_rows()`` output to XLSX, CSV or PDF.

Every report object in the engines (aging report, transaction set,
reconciliation summary, rate table, ratio report, asset register) exposes
``to_rows()``: an ordered list of dicts with stable field names.  The
writers here turn that into a file.  Column order follows the keys of the
first row unless ``columns`` is given.

Invariants enforced:
    - CSV cells hold Decimals as their exact string form.
    - XLSX cells hold Decimals as numbers.
    - Header cells are the field names, title-cased ("total_due" ->
      "Total Due").
"""

from __future__ import annotations

import csv
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.export")

XLSX_COLUMN_WIDTH = 20

Rows = Sequence[Mapping[str, Any]]


def _columns(rows: Rows, columns: Sequence[str] | None) -> list[str]:
    if columns is not None:
        return list(columns)
    return list(rows[0].keys()) if rows else []


def header_label(column: str) -> str:
    return column.replace("_", " ").title()


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _xlsx_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if value is None or isinstance(value, (int, float, str, bool, date, datetime)):
        return value
    return str(value)


def write_xlsx(
    rows: Rows,
    path: Path | str,
    sheet_title: str = "Report",
    columns: Sequence[str] | None = None,
) -> Path:
    """One worksheet: a bold header row, then one row per record."""
    path = Path(path)
    cols = _columns(rows, columns)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]
    ws.append([header_label(c) for c in cols])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append([_xlsx_value(row.get(c)) for c in cols])
    for i in range(1, len(cols) + 1):
        ws.column_dimensions[get_column_letter(i)].width = XLSX_COLUMN_WIDTH

    wb.save(path)
    logger.info(
        "report_exported",
        extra={"format": "xlsx", "row_count": len(rows), "path": str(path)},
    )
    return path


def write_csv(
    rows: Rows,
    path: Path | str,
    columns: Sequence[str] | None = None,
) -> Path:
    path = Path(path)
    cols = _columns(rows, columns)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([header_label(c) for c in cols])
        for row in rows:
            writer.writerow([_text(row.get(c)) for c in cols])
    logger.info(
        "report_exported",
        extra={"format": "csv", "row_count": len(rows), "path": str(path)},
    )
    return path


def write_pdf(
    rows: Rows,
    path: Path | str,
    title: str,
    columns: Sequence[str] | None = None,
    clock: Clock | None = None,
) -> Path:
    """Title, a "Generated: <date>" line and the rows as a grid table."""
    path = Path(path)
    cols = _columns(rows, columns)
    generated = (clock or SystemClock()).today()

    styles = getSampleStyleSheet()
    story: list[Any] = [
        Paragraph(title, styles["Title"]),
        Paragraph(f"Generated: {generated.isoformat()}", styles["Normal"]),
        Spacer(1, 12),
    ]

    data = [[header_label(c) for c in cols]]
    data.extend([_text(row.get(c)) for c in cols] for row in rows)
    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.35, colors.grey),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f0f0")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
    ]))
    story.append(table)

    pagesize = landscape(A4) if len(cols) > 6 else A4
    doc = SimpleDocTemplate(
        str(path), pagesize=pagesize,
        rightMargin=26, leftMargin=26, topMargin=26, bottomMargin=26,
    )
    doc.build(story)
    logger.info(
        "report_exported",
        extra={"format": "pdf", "row_count": len(rows), "path": str(path)},
    )
    return path
