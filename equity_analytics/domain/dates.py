"""Calendar Dates: Local-day helpers shared by every component.

All comparisons in this package happen on calendar dates in the local
timezone. Timestamps are never compared as UTC instants, which would shift
late-evening entries onto the next day.

Accepted timestamp inputs (see parse_timestamp):
- datetime objects (naive = local, aware = converted to local)
- ISO-8601 strings ("2024-01-15", "2024-01-15T14:30:00Z")
- epoch milliseconds (as exported by the journal app)
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator

DATE_FORMAT = "%Y-%m-%d"

# Preset name -> days back from today ("ytd" and "max" handled separately)
DAY_PRESETS: dict[str, int] = {"30": 30, "90": 90, "365": 365}
PRESET_NAMES = ("max", "ytd", "30", "90", "365")


def local_date(value: datetime | date) -> date:
    """Calendar date of an instant in the local timezone."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def start_of_day(d: date) -> datetime:
    """Local midnight of a calendar date (naive datetime)."""
    return datetime.combine(d, time.min)


def format_date(d: date) -> str:
    """Format as YYYY-MM-DD."""
    return d.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string without any timezone conversion.

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date
    """
    if not value:
        raise ValueError("date cannot be empty")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"date must be YYYY-MM-DD format, got: {value}") from None


def parse_timestamp(value: datetime | date | str | int | float) -> datetime:
    """Normalize a timestamp field into a datetime.

    Args:
        value: datetime, date, ISO-8601 string or epoch milliseconds

    Returns:
        datetime (naive local for date-only and epoch inputs)

    Raises:
        ValueError: If the value cannot be interpreted
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return start_of_day(value)
    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            raise ValueError(f"epoch milliseconds out of range: {value!r}") from None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("timestamp cannot be empty")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"invalid timestamp: {value!r}") from None
    raise ValueError(f"invalid timestamp: {value!r}")


def day_range(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, inclusive."""
    current = start
    step = timedelta(days=1)
    while current <= end:
        yield current
        current += step


def days_between(later: date, earlier: date) -> int:
    """Whole days from earlier to later (negative if reversed)."""
    return (later - earlier).days


def preset_bounds(name: str, today: date) -> tuple[date | None, date | None]:
    """Resolve a preset name into (start, end) bounds.

    Args:
        name: One of "max", "ytd", "30", "90", "365"
        today: Reference day

    Returns:
        (start, end); both None for "max"

    Raises:
        ValueError: If the preset is unknown
    """
    if name == "max":
        return None, None
    if name == "ytd":
        return date(today.year, 1, 1), today
    if name in DAY_PRESETS:
        return today - timedelta(days=DAY_PRESETS[name]), today
    raise ValueError(f"unknown preset: {name!r} (expected one of {', '.join(PRESET_NAMES)})")


def display_date(d: date) -> str:
    """Human-readable date, e.g. "Jan 5, 2024"."""
    return f"{d.strftime('%b')} {d.day}, {d.year}"
