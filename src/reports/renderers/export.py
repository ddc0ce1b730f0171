"""
Tabular export renderer (CSV and XLSX).

Export output is meant for spreadsheets: raw values in field order, empty
cells for missing values, every row and no display decoration (no ``%``
suffix, no ``N/A``).
"""

from __future__ import annotations

import csv
import io
import re
from typing import Any, List

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ..assembler import ReportData
from ..locales import get_translations
from ..presentation import CrystalReportConfig

# Excel sheet titles: max 31 chars, none of []:*?/\
_SHEET_TITLE_INVALID = re.compile(r"[\[\]:*?/\\]")
_SHEET_TITLE_MAX = 31
# Rough pixel -> character width ratio for column sizing
_PX_PER_CHAR = 7
_WIDTH_PX = re.compile(r"^\s*(\d+)")


def export_table(report: ReportData) -> List[List[Any]]:
    """Header row of field labels followed by one row of raw values per record."""
    fields = report.template.fields
    table: List[List[Any]] = [[f.label for f in fields]]
    table.extend([row.get(f.key) for f in fields] for row in report.data)
    return table


def render_csv(report: ReportData, config: CrystalReportConfig) -> str:
    """Render the export table as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    for row in export_table(report):
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue()


def column_width(width: str | None) -> float | None:
    """Excel column width (characters) for a display width such as ``"150px"``."""
    match = _WIDTH_PX.match(width or "")
    if not match:
        return None
    return max(int(match.group(1)) // _PX_PER_CHAR, 8)


def sheet_title(name: str) -> str:
    title = _SHEET_TITLE_INVALID.sub(" ", name).strip()[:_SHEET_TITLE_MAX]
    return title or "Report"


def _write_table(ws: Any, rows: List[List[Any]], start_row: int = 1) -> None:
    for i, row in enumerate(rows, start=start_row):
        for j, value in enumerate(row, start=1):
            if isinstance(value, str):
                # Control characters are not allowed in worksheet XML.
                value = ILLEGAL_CHARACTERS_RE.sub("", value)
            ws.cell(row=i, column=j, value=value)


def render_xlsx(report: ReportData, config: CrystalReportConfig) -> bytes:
    """Render the export table as an XLSX workbook.

    The first sheet holds the table; a second sheet lists the row count and
    aggregations.
    """
    t = get_translations(config.locale)
    fields = report.template.fields

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title(report.template.name)
    _write_table(ws, export_table(report))
    for column, report_field in enumerate(fields, start=1):
        ws.cell(1, column).font = Font(bold=True)
        width = column_width(report_field.width)
        if width:
            ws.column_dimensions[get_column_letter(column)].width = width
    ws.freeze_panes = "A2"

    summary = wb.create_sheet(sheet_title(t["summary"].title()))
    rows: List[List[Any]] = [[t["total_records"], report.summary.total_records]]
    rows.extend([key, value] for key, value in report.summary.aggregations.items())
    _write_table(summary, rows)
    for row_index in range(1, len(rows) + 1):
        summary.cell(row_index, 1).font = Font(bold=True)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
