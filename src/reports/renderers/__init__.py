"""
Report renderers.

Every renderer is a pure function ``(ReportData, CrystalReportConfig) ->
content``. ``render_report`` picks one by ``ReportFormat``:

    pdf, print  -> print-ready HTML (print also opens a print surface)
    csv, excel  -> tabular export
    text        -> fixed-width text

Usage:
    from reports.renderers import render_report

    artifact = render_report(report, "csv")
    Path(artifact.filename).write_text(artifact.content)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, NamedTuple, Optional, Union

from core.enums import ReportFormat
from core.logging import get_logger

from ..assembler import ReportData
from ..presentation import CrystalReportConfig
from .export import export_table, render_csv, render_xlsx
from .formatting import MISSING_VALUE, describe_filters, format_cell
from .html import render_html
from .text import ROW_CAP, render_text

LOGGER = get_logger("reports.renderers")


class RendererSpec(NamedTuple):
    render: Callable[[ReportData, CrystalReportConfig], Union[str, bytes]]
    media_type: str
    extension: str


RENDERERS: Dict[ReportFormat, RendererSpec] = {
    ReportFormat.PDF: RendererSpec(render_html, "text/html", "html"),
    ReportFormat.PRINT: RendererSpec(render_html, "text/html", "html"),
    ReportFormat.CSV: RendererSpec(render_csv, "text/csv", "csv"),
    ReportFormat.EXCEL: RendererSpec(
        render_xlsx,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "xlsx",
    ),
    ReportFormat.TEXT: RendererSpec(render_text, "text/plain", "txt"),
}


@dataclass(frozen=True, slots=True)
class RenderedReport:
    """A rendered artifact ready to be saved, downloaded or printed."""

    format: ReportFormat
    content: Union[str, bytes]
    media_type: str
    filename: str

    @property
    def is_binary(self) -> bool:
        return isinstance(self.content, bytes)


def report_filename(report: ReportData, extension: str) -> str:
    """``<template name>_<YYYY-MM-DD>.<ext>``, dated by generation time."""
    return f"{report.template.name}_{report.generated_at.date().isoformat()}.{extension}"


def render_report(
    report: ReportData,
    fmt: Union[ReportFormat, str],
    config: Optional[CrystalReportConfig] = None,
    *,
    surface: Optional[Any] = None,
) -> RenderedReport:
    """Render a report in the requested format.

    Args:
        report: Generated report data
        fmt: Output format (enum member or its value)
        config: Presentation configuration (defaults apply when omitted)
        surface: Print surface used for ``print``; defaults to the browser

    Raises:
        ValueError: If ``fmt`` is not a known format
        RenderSurfaceError: If the print surface is unavailable
    """
    fmt = ReportFormat(fmt)
    config = config or CrystalReportConfig()
    spec = RENDERERS[fmt]

    artifact = RenderedReport(
        format=fmt,
        content=spec.render(report, config),
        media_type=spec.media_type,
        filename=report_filename(report, spec.extension),
    )
    LOGGER.debug("Rendered report %s as %s (%s)", report.id, fmt, artifact.filename)

    if fmt is ReportFormat.PRINT:
        if surface is None:
            from ..surfaces import BrowserPrintSurface

            surface = BrowserPrintSurface()
        surface.show(artifact)
    return artifact


__all__ = [
    "MISSING_VALUE",
    "RENDERERS",
    "ROW_CAP",
    "RenderedReport",
    "RendererSpec",
    "describe_filters",
    "export_table",
    "format_cell",
    "render_csv",
    "render_html",
    "render_report",
    "render_text",
    "render_xlsx",
    "report_filename",
]
