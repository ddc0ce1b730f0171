"""
Shared date/time parsing and formatting helpers for report output.

Keeps filters, the assembler and every renderer consistent with the
selected date format.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

# Common datetime input formats to try (fallback when ISO parsing fails)
_INPUT_FORMATS = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
]

# Output date patterns keyed by date_format setting
DATE_PATTERNS = {
    "es": "%d/%m/%Y",
    "eu": "%d.%m.%Y",
    "us": "%m/%d/%Y",
    "iso": "%Y-%m-%d",
}
DEFAULT_DATE_FORMAT = "es"


def _try_parse(value: str | None) -> Optional[datetime]:
    """Try to parse a date/time string into a datetime."""
    text = (value or "").strip()
    if not text:
        return None

    # Strip a trailing " UTC" if present
    if text.endswith(" UTC"):
        text = text[:-4]

    # Try ISO parsing first (handles offsets)
    iso_candidate = text
    if iso_candidate.endswith("Z"):
        iso_candidate = iso_candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(iso_candidate)
    except ValueError:
        pass

    # If ISO failed, strip timezone offset and try common formats
    tz_split = iso_candidate
    for sep in ("+", "-"):
        idx = tz_split.find(sep, 10)  # after date part
        if idx != -1:
            tz_split = tz_split[:idx]
            break

    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(tz_split, fmt)
        except ValueError:
            continue

    return None


def parse_datetime(value: str | date | datetime | None) -> Optional[datetime]:
    """Coerce a date, datetime or string into a datetime (None if impossible)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return _try_parse(str(value))


def is_date_only(value: str | date | datetime) -> bool:
    """True when the value carries no time-of-day component."""
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return ":" not in str(value)


def to_iso_date(value: str | date | datetime | None) -> Optional[str]:
    """Normalize a date-like value to ``YYYY-MM-DD``; None when not parseable."""
    dt = parse_datetime(value)
    if dt is None:
        return None
    return dt.date().isoformat()


def format_datetime(
    value: str | datetime | None,
    date_format: str = DEFAULT_DATE_FORMAT,
    *,
    include_time: bool = True,
    include_seconds: bool = True,
) -> str:
    """Format a timestamp according to the selected date format.

    Args:
        value: Input timestamp (datetime or string).
        date_format: One of ``DATE_PATTERNS`` ("es", "eu", "us", "iso").
        include_time: Whether to include time if present.
        include_seconds: Whether to include seconds when time is shown.

    Returns:
        Formatted date/time string, or original value if parsing fails.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        dt: Optional[datetime] = value
        has_time = True
    else:
        text = str(value).strip()
        if not text:
            return ""
        dt = _try_parse(text)
        if not dt:
            return text
        has_time = ":" in text

    date_part = DATE_PATTERNS.get(date_format, DATE_PATTERNS[DEFAULT_DATE_FORMAT])
    if not include_time or not has_time:
        return dt.strftime(date_part)

    time_part = "%H:%M:%S" if include_seconds else "%H:%M"
    return dt.strftime(f"{date_part} {time_part}")


def format_date(value: str | datetime | None, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date-only value using the selected date format."""
    return format_datetime(value, date_format, include_time=False)
