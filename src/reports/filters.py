"""
Report filter model.

Normalizes a request's selection criteria into an immutable ``ReportFilter``:

- ``parse_filter()``: validate a raw mapping (UI wire names or snake_case)
- ``resolve_date_range()``: turn a date preset into concrete bounds
- ``resolve_filter()``: parse + resolve in one step
- ``merge_filters()``: overlay an explicit filter on template defaults

Usage:
    from reports.filters import resolve_filter

    report_filter = resolve_filter({"dateRange": {"preset": "this_month"},
                                    "departments": ["IT"]})
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from core.config import DEFAULT_TIMEZONE
from core.enums import DateRangePreset, ProgressStatus

from .dates import is_date_only, parse_datetime
from .exceptions import InvalidFilterError

# UI wire names -> ReportFilter attribute names
FILTER_ALIASES = {
    "dateRange": "date_range",
    "courseIds": "course_ids",
    "userIds": "user_ids",
    "minProgress": "min_progress",
    "maxProgress": "max_progress",
}

DATE_RANGE_ALIASES = {
    "startDate": "start",
    "endDate": "end",
    "start_date": "start",
    "end_date": "end",
}

PROGRESS_MIN = 0
PROGRESS_MAX = 100


def _coerce_preset(value: Any) -> DateRangePreset:
    try:
        return DateRangePreset(value)
    except ValueError as exc:
        raise InvalidFilterError(f"Unknown date range preset: {value!r}") from exc


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def _localize(moment: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        return moment
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def _ordered_bounds(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    """Return comparable bounds; a naive bound takes the timezone of an aware one."""
    if start.tzinfo is None and end.tzinfo is not None:
        start = start.replace(tzinfo=end.tzinfo)
    elif end.tzinfo is None and start.tzinfo is not None:
        end = end.replace(tzinfo=start.tzinfo)
    if start > end:
        raise InvalidFilterError(f"Date range start {start} is after end {end}")
    return start, end


@dataclass(frozen=True, slots=True)
class DateRange:
    """A date preset and, once resolved, its concrete bounds."""

    preset: DateRangePreset
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "preset", _coerce_preset(self.preset))

    @property
    def is_resolved(self) -> bool:
        return self.start is not None and self.end is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preset": str(self.preset),
            "startDate": self.start.isoformat() if self.start else None,
            "endDate": self.end.isoformat() if self.end else None,
        }


def _normalize_strings(name: str, values: Any) -> Optional[Tuple[str, ...]]:
    """Tuple of unique strings in input order; empty collections become None."""
    if values is None:
        return None
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InvalidFilterError(f"Filter '{name}' must be a list of values")
    result: List[str] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise InvalidFilterError(f"Filter '{name}' contains an invalid value: {value!r}")
        text = str(value)
        if text not in result:
            result.append(text)
    return tuple(result) or None


def _normalize_status(values: Any) -> Optional[Tuple[ProgressStatus, ...]]:
    names = _normalize_strings("status", values)
    if names is None:
        return None
    try:
        return tuple(ProgressStatus(name) for name in names)
    except ValueError as exc:
        raise InvalidFilterError(f"Unknown status value in filter: {exc}") from exc


def _normalize_progress(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFilterError(f"Filter '{name}' must be a number")
    if not PROGRESS_MIN <= value <= PROGRESS_MAX:
        raise InvalidFilterError(
            f"Filter '{name}' must be between {PROGRESS_MIN} and {PROGRESS_MAX}, got {value}"
        )
    return value


@dataclass(frozen=True, slots=True)
class ReportFilter:
    """Canonical selection criteria. ``None`` means "dimension not set"."""

    date_range: Optional[DateRange] = None
    departments: Optional[Tuple[str, ...]] = None
    course_ids: Optional[Tuple[str, ...]] = None
    user_ids: Optional[Tuple[str, ...]] = None
    status: Optional[Tuple[ProgressStatus, ...]] = None
    min_progress: Optional[float] = None
    max_progress: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("departments", "course_ids", "user_ids"):
            object.__setattr__(self, name, _normalize_strings(name, getattr(self, name)))
        object.__setattr__(self, "status", _normalize_status(self.status))
        object.__setattr__(self, "min_progress", _normalize_progress("min_progress", self.min_progress))
        object.__setattr__(self, "max_progress", _normalize_progress("max_progress", self.max_progress))

        if (
            self.min_progress is not None
            and self.max_progress is not None
            and self.min_progress > self.max_progress
        ):
            raise InvalidFilterError(
                f"min_progress ({self.min_progress}) is greater than max_progress ({self.max_progress})"
            )

    @property
    def is_empty(self) -> bool:
        return not self.active_dimensions()

    def active_dimensions(self) -> List[Tuple[str, Any]]:
        """(name, value) pairs of the dimensions that are set, in field order."""
        return [
            (f.name, getattr(self, f.name))
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the UI wire names."""
        return {
            "dateRange": self.date_range.to_dict() if self.date_range else None,
            "departments": list(self.departments) if self.departments else None,
            "courseIds": list(self.course_ids) if self.course_ids else None,
            "userIds": list(self.user_ids) if self.user_ids else None,
            "status": [str(s) for s in self.status] if self.status else None,
            "minProgress": self.min_progress,
            "maxProgress": self.max_progress,
        }


def _parse_bound(name: str, value: Any, *, end: bool) -> Optional[datetime]:
    if value is None or value == "":
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise InvalidFilterError(f"Invalid date for '{name}': {value!r}")
    if end and is_date_only(value):
        # A date-only end bound covers the whole day.
        parsed = _end_of_day(parsed)
    return parsed


def _parse_date_range(raw: Any) -> Optional[DateRange]:
    if raw is None:
        return None
    if isinstance(raw, DateRange):
        return raw
    if isinstance(raw, str):
        return DateRange(preset=_coerce_preset(raw))
    if not isinstance(raw, Mapping):
        raise InvalidFilterError("Filter 'date_range' must be a mapping")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        name = DATE_RANGE_ALIASES.get(key, key)
        if name not in ("preset", "start", "end"):
            raise InvalidFilterError(f"Unknown date range key: {key!r}")
        values[name] = value
    if "preset" not in values:
        raise InvalidFilterError("Date range requires a preset")

    preset = _coerce_preset(values["preset"])
    start = _parse_bound("start", values.get("start"), end=False)
    end = _parse_bound("end", values.get("end"), end=True)

    if preset is DateRangePreset.CUSTOM:
        if start is None or end is None:
            raise InvalidFilterError("Custom date range requires both start and end dates")
        start, end = _ordered_bounds(start, end)
        return DateRange(preset=preset, start=start, end=end)

    # Bounds of named presets are always derived, never taken from the caller.
    return DateRange(preset=preset)


def parse_filter(raw: Mapping[str, Any] | ReportFilter | None) -> ReportFilter:
    """Validate a raw filter mapping into a ``ReportFilter`` (presets unresolved).

    Raises:
        InvalidFilterError: on unknown keys, unknown presets/statuses,
            malformed dates, out-of-range or contradictory progress bounds.
    """
    if raw is None:
        return ReportFilter()
    if isinstance(raw, ReportFilter):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidFilterError("Filter must be a mapping")

    known = {f.name for f in fields(ReportFilter)}
    values: Dict[str, Any] = {}
    for key, value in raw.items():
        name = FILTER_ALIASES.get(key, key)
        if name not in known:
            raise InvalidFilterError(f"Unknown filter key: {key!r}")
        values[name] = value

    values["date_range"] = _parse_date_range(values.get("date_range"))
    return ReportFilter(**values)


def resolve_date_range(
    date_range: DateRange,
    now: datetime,
    fiscal_year_start_month: int = 1,
) -> DateRange:
    """Resolve a preset into concrete ``[start, end]`` bounds relative to ``now``.

    Args:
        date_range: Range to resolve (custom ranges are validated and localized)
        now: Current instant in the reporting timezone
        fiscal_year_start_month: Month (1-12) in which the fiscal year begins

    Returns:
        A resolved DateRange with the same preset
    """
    preset = date_range.preset
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if preset is DateRangePreset.TODAY:
        return DateRange(preset, day_start, _end_of_day(now))

    if preset is DateRangePreset.THIS_WEEK:
        return DateRange(preset, day_start - timedelta(days=now.weekday()), now)

    if preset is DateRangePreset.THIS_MONTH:
        return DateRange(preset, day_start.replace(day=1), now)

    if preset is DateRangePreset.LAST_MONTH:
        last_day_prev = day_start.replace(day=1) - timedelta(days=1)
        return DateRange(preset, last_day_prev.replace(day=1), _end_of_day(last_day_prev))

    if preset is DateRangePreset.THIS_QUARTER:
        months_into_quarter = (now.month - fiscal_year_start_month) % 3
        month = now.month - months_into_quarter
        year = now.year
        if month < 1:
            month += 12
            year -= 1
        return DateRange(preset, day_start.replace(year=year, month=month, day=1), now)

    if preset is DateRangePreset.THIS_YEAR:
        return DateRange(preset, day_start.replace(month=1, day=1), now)

    # CUSTOM
    if date_range.start is None or date_range.end is None:
        raise InvalidFilterError("Custom date range requires both start and end dates")
    start = _localize(date_range.start, now.tzinfo)
    end = _localize(date_range.end, now.tzinfo)
    start, end = _ordered_bounds(start, end)
    return DateRange(preset, start, end)


def resolve_filter_dates(
    report_filter: ReportFilter,
    now: datetime,
    fiscal_year_start_month: int = 1,
) -> ReportFilter:
    """Return ``report_filter`` with its date range resolved (if it has one)."""
    if report_filter.date_range is None:
        return report_filter
    resolved = resolve_date_range(report_filter.date_range, now, fiscal_year_start_month)
    return replace(report_filter, date_range=resolved)


def resolve_filter(
    raw: Mapping[str, Any] | ReportFilter | None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    fiscal_year_start_month: int = 1,
) -> ReportFilter:
    """Parse a raw filter and resolve its date preset into concrete bounds."""
    if now is None:
        now = datetime.now(tz or ZoneInfo(DEFAULT_TIMEZONE))
    return resolve_filter_dates(parse_filter(raw), now, fiscal_year_start_month)


def merge_filters(defaults: Optional[ReportFilter], explicit: Optional[ReportFilter]) -> ReportFilter:
    """Overlay ``explicit`` on ``defaults`` field by field.

    A field set in ``explicit`` replaces the default wholesale; sub-objects
    such as the date range are never merged internally.
    """
    defaults = defaults or ReportFilter()
    if explicit is None:
        return defaults
    merged = {
        f.name: getattr(explicit, f.name)
        if getattr(explicit, f.name) is not None
        else getattr(defaults, f.name)
        for f in fields(ReportFilter)
    }
    return ReportFilter(**merged)
