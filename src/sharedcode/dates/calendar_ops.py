"""Calendar arithmetic helpers for ``datetime`` values."""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta

_DATE_PARTS: dict[str, str] = {
    "year": "year",
    "yy": "year",
    "yyyy": "year",
    "quarter": "quarter",
    "qq": "quarter",
    "q": "quarter",
    "month": "month",
    "mm": "month",
    "m": "month",
    "day": "day",
    "dd": "day",
    "d": "day",
    "week": "week",
    "wk": "week",
    "ww": "week",
    "hour": "hour",
    "hh": "hour",
    "minute": "minute",
    "mi": "minute",
    "n": "minute",
    "second": "second",
    "ss": "second",
    "s": "second",
    "millisecond": "millisecond",
    "ms": "millisecond",
}

_PART_UNITS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "hour": timedelta(hours=1),
    "minute": timedelta(minutes=1),
    "second": timedelta(seconds=1),
    "millisecond": timedelta(milliseconds=1),
}


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to timezone-aware UTC, assuming UTC for naive values."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def is_weekend(value: date) -> bool:
    """Return True for Saturday and Sunday."""
    return value.weekday() >= 5


def add_workdays(value: datetime, days: int) -> datetime:
    """Advance ``value`` by ``days`` working days, skipping weekends.

    A weekend start is first moved to the following Monday.
    """
    if days < 0:
        raise ValueError("days must be non-negative")
    one_day = timedelta(days=1)
    out = value
    while is_weekend(out):
        out += one_day
    for _ in range(days):
        out += one_day
        while is_weekend(out):
            out += one_day
    return out


def age(date_of_birth: date, today: date | None = None) -> int:
    """Return completed years between ``date_of_birth`` and ``today``."""
    current = today or date.today()
    years = current.year - date_of_birth.year
    if (current.month, current.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


def utc_offset_minutes(value: datetime) -> int:
    """Return the UTC offset of ``value`` in whole minutes; naive values count as UTC."""
    offset = value.utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds() // 60)


def date_diff(start: datetime, date_part: str, end: datetime) -> int:
    """Count ``date_part`` boundaries or whole units between ``start`` and ``end``.

    Calendar parts (year, quarter, month) compare fields; the rest truncate the
    elapsed time toward zero, as T-SQL ``DATEDIFF`` style helpers do.
    """
    part = _DATE_PARTS.get(date_part.strip().lower())
    if part is None:
        raise ValueError(f"DatePart {date_part!r} is unknown")

    if part == "year":
        return end.year - start.year
    if part == "quarter":
        return (end.year - start.year) * 4 + (end.month - 1) // 3 - (start.month - 1) // 3
    if part == "month":
        return (end.year - start.year) * 12 + end.month - start.month

    elapsed = to_utc(end) - to_utc(start)
    return int(elapsed / _PART_UNITS[part])


def first_day_of_month(value: datetime) -> datetime:
    """Return midnight on the first day of ``value``'s month, keeping its tzinfo."""
    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def last_day_of_month(value: datetime) -> datetime:
    """Return midnight on the last day of ``value``'s month, keeping its tzinfo."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return first_day_of_month(value).replace(day=last_day)


def date_range(start: datetime, end: datetime) -> Iterator[datetime]:
    """Yield midnights from ``start``'s date for each whole day until ``end`` (exclusive)."""
    first = start.replace(hour=0, minute=0, second=0, microsecond=0)
    for offset in range((end - start).days):
        yield first + timedelta(days=offset)


def intersects(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Return True when [start, end] and [other_start, other_end] overlap."""
    return other_end >= start and other_start <= end


def is_between(value: datetime, start: datetime, end: datetime, compare_time: bool = False) -> bool:
    """Return True when ``value`` lies within [start, end], by date unless ``compare_time``."""
    if compare_time:
        return start <= value <= end
    return start.date() <= value.date() <= end.date()


def to_unix_timestamp(value: datetime) -> int:
    """Return whole seconds since the Unix epoch; naive values count as UTC."""
    return int(to_utc(value).timestamp())
