"""
Core Enumerations

Centralized enum definitions for consistent typing across the codebase.
Using StrEnum (Python 3.11+) for string-based enums that serialize naturally.
"""

from enum import StrEnum


class ReportType(StrEnum):
    """Report families known to the template catalog."""

    EMPLOYEE_PROGRESS = "employee_progress"
    DEPARTMENT_STATISTICS = "department_statistics"
    CERTIFICATIONS = "certifications"
    PENDING_ASSIGNMENTS = "pending_assignments"
    SYSTEM_PERFORMANCE = "system_performance"
    COMPLETION_HISTORY = "completion_history"
    CUSTOM = "custom"


class ReportFormat(StrEnum):
    """Output formats accepted by the renderer dispatcher."""

    PDF = "pdf"
    EXCEL = "excel"
    CSV = "csv"
    PRINT = "print"
    TEXT = "text"

    @classmethod
    def html_formats(cls) -> tuple["ReportFormat", ...]:
        """Formats served by the printable HTML renderer."""
        return (cls.PDF, cls.PRINT)

    @classmethod
    def export_formats(cls) -> tuple["ReportFormat", ...]:
        """Formats served by the row/column export renderer."""
        return (cls.EXCEL, cls.CSV)


class DateRangePreset(StrEnum):
    """Named date windows, resolved relative to "now"."""

    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    THIS_YEAR = "this_year"
    CUSTOM = "custom"


class FieldType(StrEnum):
    """Semantic type of a report column; governs per-cell formatting."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    PERCENTAGE = "percentage"
    STATUS = "status"
    BADGE = "badge"

    @classmethod
    def numeric_types(cls) -> tuple["FieldType", ...]:
        return (cls.NUMBER, cls.PERCENTAGE)


class ProgressStatus(StrEnum):
    """Course assignment status values usable as a filter dimension."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    NOT_STARTED = "not_started"
    OVERDUE = "overdue"


class Role(StrEnum):
    """Roles that gate template visibility."""

    ADMIN = "admin"
    RH = "rh"


class PageSize(StrEnum):
    LETTER = "letter"
    A4 = "a4"
    LEGAL = "legal"


class Orientation(StrEnum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class ChartType(StrEnum):
    """Chart descriptor kinds attached to a report summary."""

    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"


class Reducer(StrEnum):
    """Declared aggregation reducers."""

    COUNT = "count"
    SUM = "sum"
    AVERAGE = "average"
    RATE = "rate"
