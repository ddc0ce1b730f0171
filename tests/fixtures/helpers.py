from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from reports.filters import ReportFilter

REPORT_TZ = ZoneInfo("America/Mexico_City")

# Wednesday
FIXED_NOW = datetime(2024, 5, 15, 10, 30, 0, tzinfo=REPORT_TZ)


class StubDataSource:
    """Data source returning canned records and recording each call."""

    def __init__(self, records: Sequence[Mapping[str, Any]] = (), error: Optional[Exception] = None):
        self.records = [dict(r) for r in records]
        self.error = error
        self.calls: List[ReportFilter] = []

    def fetch_records(self, report_filter: ReportFilter) -> List[Dict[str, Any]]:
        self.calls.append(report_filter)
        if self.error is not None:
            raise self.error
        return [dict(r) for r in self.records]


def progress_records(count: int) -> List[Dict[str, Any]]:
    """``count`` employee rows with cycling progress values."""
    return [{"name": f"Empleado {i:03d}", "progress": (i * 7) % 101} for i in range(1, count + 1)]


def data_lines(text: str, header: str) -> List[str]:
    """Lines between the column header's rule and the next blank line."""
    lines = text.splitlines()
    start = lines.index(header) + 2
    body: List[str] = []
    for line in lines[start:]:
        if not line:
            break
        body.append(line)
    return body
