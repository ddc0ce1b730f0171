"""
Report template catalog.

Usage:
    from reports.catalog import get_registry

    registry = get_registry()
    template = registry.get("rpt_employee_progress")
    visible = registry.list_for("rh")
"""

from .base import AggregationSpec, ChartSpec, ReportField, ReportTemplate
from .registry import TemplateRegistry, build_registry, get_registry, load_catalog

__all__ = [
    "AggregationSpec",
    "ChartSpec",
    "ReportField",
    "ReportTemplate",
    "TemplateRegistry",
    "build_registry",
    "get_registry",
    "load_catalog",
]
