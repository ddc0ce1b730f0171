"""
Report data assembler.

Turns a template plus a filter into an immutable ``ReportData``:

1. merge the filter over the template's default filters
2. fetch raw records from the injected data-access collaborator
3. project each record onto exactly the template's field keys (type coercion)
4. compute the summary (row count, declared aggregations, charts)
5. stamp generation time and author

Usage:
    from reports.assembler import ReportAssembler

    assembler = ReportAssembler(data_source)
    report = assembler.generate(template, report_filter, requested_by="Ana")
"""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple
from zoneinfo import ZoneInfo

from core.config import DEFAULT_TIMEZONE
from core.enums import ChartType, FieldType
from core.logging import get_logger

from .aggregations import build_chart_data, compute_aggregations
from .catalog.base import ReportField, ReportTemplate
from .dates import to_iso_date
from .exceptions import DataSourceError
from .filters import ReportFilter, merge_filters, resolve_filter_dates

LOGGER = get_logger("reports.assembler")

Row = Mapping[str, Any]


class DataSource(Protocol):
    """Data-access collaborator: returns the raw records matching a filter."""

    def fetch_records(self, report_filter: ReportFilter) -> Sequence[Mapping[str, Any]]:
        ...


@dataclass(frozen=True, slots=True)
class ChartData:
    """A computed chart descriptor."""

    type: ChartType
    title: str
    data: Tuple[Mapping[str, Any], ...] = ()
    x_key: Optional[str] = None
    y_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": str(self.type),
            "title": self.title,
            "data": [dict(point) for point in self.data],
            "xKey": self.x_key,
            "yKey": self.y_key,
        }


@dataclass(frozen=True, slots=True)
class ReportSummary:
    """Row count, declared aggregations and charts of a report."""

    total_records: int
    aggregations: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    charts: Tuple[ChartData, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "aggregations": dict(self.aggregations),
            "charts": [chart.to_dict() for chart in self.charts],
        }


@dataclass(frozen=True, slots=True)
class ReportData:
    """A generated report. Produced once per request, never mutated."""

    id: str
    template: ReportTemplate
    filters: ReportFilter
    generated_at: datetime
    generated_by: str
    data: Tuple[Mapping[str, Any], ...]
    summary: ReportSummary

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the UI wire names."""
        return {
            "id": self.id,
            "templateId": self.template.id,
            "filters": self.filters.to_dict(),
            "generatedAt": self.generated_at.isoformat(),
            "generatedBy": self.generated_by,
            "data": [dict(row) for row in self.data],
            "summary": self.summary.to_dict(),
        }


def coerce_number(value: Any) -> int | float:
    """Read an int or float from a number or a string such as ``"83%"`` or ``"1,250"``.

    Raises:
        ValueError: For booleans, non-numeric text and non-finite values
    """
    if isinstance(value, bool):
        raise ValueError(f"boolean is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    else:
        text = str(value).strip().rstrip("%").strip().replace(",", "")
        number = float(text)
        if number.is_integer() and "." not in text:
            return int(number)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number: {value!r}")
    return number


def coerce_value(report_field: ReportField, value: Any) -> Any:
    """Coerce a raw record value to the type implied by the field.

    Raises:
        ValueError: If the value cannot be represented in the field's type
    """
    if value is None:
        return None
    if report_field.type in FieldType.numeric_types():
        return coerce_number(value)
    if report_field.type is FieldType.DATE:
        if isinstance(value, (date, datetime)):
            return to_iso_date(value)
        iso = to_iso_date(str(value))
        # Non-date placeholders are kept as text rather than rejected.
        return iso if iso is not None else str(value)
    return value if isinstance(value, str) else str(value)


def project_record(template: ReportTemplate, record: Mapping[str, Any]) -> Mapping[str, Any]:
    """Project a raw record onto exactly the template's field keys."""
    if not isinstance(record, Mapping):
        raise DataSourceError(f"Template '{template.id}' received a non-mapping record: {record!r}")
    row: Dict[str, Any] = {}
    for report_field in template.fields:
        try:
            row[report_field.key] = coerce_value(report_field, record.get(report_field.key))
        except (TypeError, ValueError) as exc:
            raise DataSourceError(
                f"Field '{report_field.key}' of template '{template.id}' "
                f"has an invalid {report_field.type} value: {record.get(report_field.key)!r}"
            ) from exc
    return MappingProxyType(row)


def summarize(template: ReportTemplate, rows: Sequence[Row]) -> ReportSummary:
    """Compute the summary of a full (never truncated) row set."""
    charts = tuple(
        ChartData(
            type=chart.type,
            title=chart.title,
            data=tuple(MappingProxyType(point) for point in build_chart_data(chart, rows)),
            x_key=chart.x_key,
            y_key=chart.y_key,
        )
        for chart in template.charts
    )
    return ReportSummary(
        total_records=len(rows),
        aggregations=MappingProxyType(compute_aggregations(template.aggregations, rows)),
        charts=charts,
    )


def _new_report_id() -> str:
    return f"report_{uuid.uuid4().hex}"


class ReportAssembler:
    """Builds ``ReportData`` from a template, a filter and a data source.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        data_source: DataSource,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
        tz: Optional[tzinfo] = None,
        fiscal_year_start_month: int = 1,
    ):
        """Initialize the assembler.

        Args:
            data_source: Collaborator returning raw records for a filter
            clock: Returns "now"; defaults to the current time in ``tz``
            id_factory: Returns a new report id
            tz: Reporting timezone (default America/Mexico_City)
            fiscal_year_start_month: First month of the fiscal year
        """
        self._data_source = data_source
        self._tz = tz or ZoneInfo(DEFAULT_TIMEZONE)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._id_factory = id_factory or _new_report_id
        self._fiscal_year_start_month = fiscal_year_start_month

    def merge_filter(self, template: ReportTemplate, report_filter: Optional[ReportFilter], now: datetime) -> ReportFilter:
        """Merge over the template defaults and resolve the date range against ``now``."""
        merged = merge_filters(template.default_filters, report_filter)
        if merged.date_range is not None:
            merged = resolve_filter_dates(merged, now, self._fiscal_year_start_month)
        return merged

    def fetch_rows(self, template: ReportTemplate, merged: ReportFilter) -> List[Row]:
        """Fetch and project the records; any failure becomes ``DataSourceError``."""
        try:
            records = list(self._data_source.fetch_records(merged))
        except DataSourceError:
            raise
        except Exception as exc:
            LOGGER.error("Data source failed for template %s: %s", template.id, exc)
            raise DataSourceError(f"Data source failed for template '{template.id}'") from exc

        return [project_record(template, record) for record in records]

    def generate(
        self,
        template: ReportTemplate,
        report_filter: Optional[ReportFilter],
        requested_by: str,
    ) -> ReportData:
        """Generate a report. All-or-nothing: errors leave no partial result.

        Raises:
            InvalidFilterError: If the merged filter is contradictory
            DataSourceError: If the collaborator fails or returns bad records
        """
        started = time.perf_counter()
        now = self._clock()
        merged = self.merge_filter(template, report_filter, now)
        rows = self.fetch_rows(template, merged)

        report = ReportData(
            id=self._id_factory(),
            template=template,
            filters=merged,
            generated_at=now,
            generated_by=requested_by,
            data=tuple(rows),
            summary=summarize(template, rows),
        )
        LOGGER.info(
            "Generated report %s (template=%s, rows=%d, by=%s) in %.3fs",
            report.id,
            template.id,
            len(rows),
            requested_by,
            time.perf_counter() - started,
        )
        return report
