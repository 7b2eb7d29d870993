"""Date-interval helpers used by the expansion engine and the month grid."""

from __future__ import annotations

import enum
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from .const import WEEK_END, WEEK_START


class TimeUnit(str, enum.Enum):
    """Calendar units a recurrence can step by."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def is_within(point: datetime, range_start: datetime, range_end: datetime) -> bool:
    """Inclusive containment test.

    Raises:
        ValueError: If the range is inverted.
    """
    if range_start > range_end:
        raise ValueError(f"Invalid range: {range_start} is after {range_end}")
    return range_start <= point <= range_end


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Whether two closed intervals share at least one instant."""
    return a_start <= b_end and b_start <= a_end


def advance(value: datetime, unit: TimeUnit, n: int) -> datetime:
    """Shift ``value`` by ``n`` days, weeks or months in wall-clock time.

    Month steps clamp to the last valid day of the target month, so
    Jan 31 + 1 month is Feb 28 (or Feb 29 in a leap year).
    """
    if unit is TimeUnit.DAY:
        return value + relativedelta(days=n)
    if unit is TimeUnit.WEEK:
        return value + relativedelta(weeks=n)
    if unit is TimeUnit.MONTH:
        return value + relativedelta(months=n)
    raise ValueError(f"Unsupported time unit: {unit!r}")


def month_window(anchor: date | datetime) -> tuple[datetime, datetime]:
    """Return the visible month grid around ``anchor``.

    The grid covers the anchor's calendar month extended outward to whole
    Sunday-to-Saturday weeks: from midnight of the first Sunday through the
    last microsecond of the final Saturday.
    """
    if not isinstance(anchor, datetime):
        anchor = datetime(anchor.year, anchor.month, anchor.day)
    month_start = anchor.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    window_start = month_start + relativedelta(weekday=WEEK_START(-1))
    window_end = month_start + relativedelta(
        months=1,
        days=-1,
        weekday=WEEK_END(+1),
        hour=23,
        minute=59,
        second=59,
        microsecond=999999,
    )
    return window_start, window_end
