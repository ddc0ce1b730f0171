"""
In-memory data-access collaborator.

``InMemoryDataSource`` holds plain records (e.g. loaded from a JSON export of
the training platform) and returns those matching a ``ReportFilter``. It is
the reference implementation of the ``DataSource`` protocol used by the CLI
and the tests; a database-backed collaborator would implement the same
``fetch_records`` method.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .assembler import coerce_number
from .dates import parse_datetime
from .exceptions import DataSourceError
from .filters import ReportFilter

logger = logging.getLogger(__name__)

# Filter dimension -> record key it is matched against
DEFAULT_FILTER_KEYS: Dict[str, str] = {
    "departments": "department",
    "course_ids": "courseId",
    "user_ids": "userId",
    "status": "statusCode",
    "progress": "progress",
    "date": "date",
}


def _same_awareness(value: datetime, reference: datetime) -> datetime:
    """Make ``value`` comparable with ``reference`` (naive vs aware)."""
    if reference.tzinfo is not None and value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


class InMemoryDataSource:
    """Filters a fixed list of records in memory.

    Matching rules:
    - departments / course ids / user ids / status: record value must be in the set
    - progress bounds: text such as "83%" is read as a number, missing progress counts as 0
    - date range: records without a parseable date pass
    """

    def __init__(
        self,
        records: Iterable[Mapping[str, Any]],
        filter_keys: Optional[Mapping[str, str]] = None,
    ):
        self._records = [dict(record) for record in records]
        self._keys = {**DEFAULT_FILTER_KEYS, **(filter_keys or {})}

    @classmethod
    def from_json(cls, path: Path, filter_keys: Optional[Mapping[str, str]] = None) -> "InMemoryDataSource":
        """Load records from a JSON file holding a list of objects.

        Raises:
            DataSourceError: If the file cannot be read or has the wrong shape
        """
        try:
            content = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise DataSourceError(f"Cannot load records from {path}") from exc
        if isinstance(content, dict):
            content = content.get("records", [])
        if not isinstance(content, list) or not all(isinstance(r, dict) for r in content):
            raise DataSourceError(f"Records file {path} must contain a list of objects")
        logger.debug("Loaded %d record(s) from %s", len(content), path)
        return cls(content, filter_keys=filter_keys)

    def __len__(self) -> int:
        return len(self._records)

    def _progress(self, record: Mapping[str, Any]) -> int | float:
        value = record.get(self._keys["progress"])
        if value is None or value == "":
            return 0
        try:
            return coerce_number(value)
        except ValueError as exc:
            raise DataSourceError(f"Record has an invalid progress value: {value!r}") from exc

    def matches(self, record: Mapping[str, Any], report_filter: ReportFilter) -> bool:
        """Check a single record against every active filter dimension."""
        keys = self._keys
        for dimension in ("departments", "course_ids", "user_ids"):
            allowed = getattr(report_filter, dimension)
            if allowed is not None and str(record.get(keys[dimension])) not in allowed:
                return False

        if report_filter.status is not None and record.get(keys["status"]) not in report_filter.status:
            return False

        if report_filter.min_progress is not None or report_filter.max_progress is not None:
            progress = self._progress(record)
            if report_filter.min_progress is not None and progress < report_filter.min_progress:
                return False
            if report_filter.max_progress is not None and progress > report_filter.max_progress:
                return False

        date_range = report_filter.date_range
        if date_range is not None and date_range.is_resolved:
            moment = parse_datetime(record.get(keys["date"]))
            if moment is not None:
                moment = _same_awareness(moment, date_range.start)
                if not date_range.start <= moment <= date_range.end:
                    return False
        return True

    def fetch_records(self, report_filter: ReportFilter) -> List[Dict[str, Any]]:
        """Return copies of the matching records in their stored order."""
        selected = [dict(r) for r in self._records if self.matches(r, report_filter)]
        logger.debug("Selected %d of %d record(s)", len(selected), len(self._records))
        return selected
