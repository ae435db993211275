"""Named date/time output formats declared as enum labels."""

from __future__ import annotations

from datetime import datetime
from enum import Enum, auto

from sharedcode.enums.labels import EnumLabelRegistry, label_of, string_values


@string_values(
    SHORT_DATE="%m/%d/%Y",
    LONG_DATE="%A, %B %d, %Y",
    SHORT_TIME="%I:%M %p",
    LONG_TIME="%I:%M:%S %p",
    TIME_24H="%H:%M:%S",
    FULL_DATE_TIME="%A, %B %d, %Y %I:%M:%S %p",
    MONTH_DAY="%B %d",
    YEAR_MONTH="%B %Y",
    SORTABLE="%Y-%m-%dT%H:%M:%S",
    UNIVERSAL_SORTABLE="%Y-%m-%d %H:%M:%SZ",
    RFC_1123="%a, %d %b %Y %H:%M:%S GMT",
    ISO_8601="%Y-%m-%dT%H:%M:%S%z",
)
class DateTimeFormat(Enum):
    """Output formats; each member's label is its ``strftime`` pattern."""

    SHORT_DATE = auto()
    LONG_DATE = auto()
    SHORT_TIME = auto()
    LONG_TIME = auto()
    TIME_24H = auto()
    FULL_DATE_TIME = auto()
    MONTH_DAY = auto()
    YEAR_MONTH = auto()
    SORTABLE = auto()
    UNIVERSAL_SORTABLE = auto()
    RFC_1123 = auto()
    ISO_8601 = auto()
    CUSTOM = auto()


def format_datetime(
    value: datetime,
    fmt: DateTimeFormat,
    registry: EnumLabelRegistry | None = None,
) -> str:
    """Format ``value`` with the pattern declared on ``fmt``."""
    pattern = label_of(fmt, registry)
    if pattern is None:
        raise ValueError(f"{fmt} has no declared format pattern")
    return value.strftime(pattern)
