"""
Cell and filter formatting shared by the text and HTML renderers.

Both display renderers go through these helpers, so missing values,
percentages and filter summaries look the same in every display format.
"""

from __future__ import annotations

from typing import Any, List, Tuple

from core.enums import FieldType

from ..catalog.base import ReportField
from ..filters import ReportFilter
from ..locales import TranslationDict

MISSING_VALUE = "N/A"

# Filter dimension -> translation key of its label
FILTER_LABEL_KEYS = {
    "date_range": "filter_date_range",
    "departments": "filter_departments",
    "course_ids": "filter_courses",
    "user_ids": "filter_users",
    "status": "filter_status",
    "min_progress": "filter_min_progress",
    "max_progress": "filter_max_progress",
}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: int | float) -> str:
    """Integral floats print without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_cell(report_field: ReportField, value: Any) -> str:
    """Display text of one cell.

    ``None`` becomes ``N/A``; numeric percentages get a ``%`` suffix;
    everything else is its literal value.
    """
    if value is None:
        return MISSING_VALUE
    if is_number(value):
        text = format_number(value)
        return f"{text}%" if report_field.type is FieldType.PERCENTAGE else text
    return str(value)


def _format_filter_value(name: str, value: Any) -> str:
    if name == "date_range":
        # Shown by preset name, never by the raw bounds.
        return str(value.preset)
    if name in ("min_progress", "max_progress"):
        return f"{format_number(value)}%"
    return ", ".join(str(v) for v in value)


def describe_filters(report_filter: ReportFilter, t: TranslationDict) -> List[Tuple[str, str]]:
    """(label, value) pairs for the non-empty filter dimensions."""
    return [
        (t[FILTER_LABEL_KEYS[name]], _format_filter_value(name, value))
        for name, value in report_filter.active_dimensions()
    ]
