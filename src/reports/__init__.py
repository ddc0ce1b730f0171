"""Reports module - report generation and export for the training platform.

This module provides:
- Filter model and date-range presets in reports.filters
- Template catalog and registry in reports.catalog
- Data assembly (projection, aggregations, charts) in reports.assembler
- Text, HTML and CSV/XLSX renderers in reports.renderers
- Presentation configuration in reports.presentation
- Print/PDF surfaces in reports.surfaces
- HTML templates in reports/templates/
"""

from core.app_version import get_app_version

__version__ = get_app_version()

from .assembler import ChartData, DataSource, ReportAssembler, ReportData, ReportSummary
from .catalog import ReportField, ReportTemplate, TemplateRegistry, get_registry
from .datasource import InMemoryDataSource
from .exceptions import (
    DataSourceError,
    InvalidFilterError,
    PresentationConfigError,
    RenderSurfaceError,
    ReportError,
    TemplateNotFoundError,
)
from .filters import DateRange, ReportFilter, merge_filters, parse_filter, resolve_filter
from .presentation import CrystalReportConfig
from .renderers import RenderedReport, render_csv, render_html, render_text, render_xlsx
from .service import ReportService, generate_report, render_report

__all__ = [
    "ChartData",
    "CrystalReportConfig",
    "DataSource",
    "DataSourceError",
    "DateRange",
    "InMemoryDataSource",
    "InvalidFilterError",
    "PresentationConfigError",
    "RenderSurfaceError",
    "RenderedReport",
    "ReportAssembler",
    "ReportData",
    "ReportError",
    "ReportField",
    "ReportFilter",
    "ReportService",
    "ReportSummary",
    "ReportTemplate",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "generate_report",
    "get_registry",
    "merge_filters",
    "parse_filter",
    "render_csv",
    "render_html",
    "render_report",
    "render_text",
    "render_xlsx",
    "resolve_filter",
]
