"""Conversions between HH:MM times, calendar dates and nanosecond epoch timestamps.

Flight timestamps are signed 64-bit integers counting nanoseconds since the
Unix epoch. Calendar bucketing always takes an explicit ``tz`` (UTC by
default) so results never depend on the host's local timezone.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from flightlog.errors import InvalidDate, InvalidDuration, InvalidTimeFormat

NS_PER_MICROSECOND = 1_000
NS_PER_SECOND = 1_000_000_000
MINUTES_PER_HOUR = 60

# H:MM or HH:MM, 00:00-23:59. Shared with the FlightRecord field validation.
TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_TIME_PATTERN = re.compile(TIME_PATTERN)
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_MONTH_PATTERN = re.compile(r"([0-9]{4})-(0[1-9]|1[0-2])")


# --- Time of day ---


def time_to_minutes(t: str) -> int:
    """'09:30' -> 570. Raises InvalidTimeFormat unless H:MM / HH:MM in range."""
    match = _TIME_PATTERN.fullmatch(t) if isinstance(t, str) else None
    if match is None:
        raise InvalidTimeFormat(t)
    return int(match.group(1)) * MINUTES_PER_HOUR + int(match.group(2))


def is_valid_time(t: str) -> bool:
    return isinstance(t, str) and _TIME_PATTERN.fullmatch(t) is not None


def duration_minutes(takeoff: str, landing: str) -> int:
    """Minutes between takeoff and landing on the same day.

    Flights crossing midnight are not supported: a landing at or before
    takeoff raises InvalidDuration rather than producing zero.
    """
    minutes = time_to_minutes(landing) - time_to_minutes(takeoff)
    if minutes <= 0:
        raise InvalidDuration(takeoff, landing)
    return minutes


# --- Epoch timestamps ---


def datetime_to_epoch(dt: datetime) -> int:
    """Timezone-aware datetime -> nanoseconds since the epoch."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("datetime must be timezone-aware")
    delta = dt - _EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return seconds * NS_PER_SECOND + delta.microseconds * NS_PER_MICROSECOND


def epoch_to_datetime(ts: int, tz: tzinfo = timezone.utc) -> datetime:
    """Nanoseconds since the epoch -> aware datetime in ``tz`` (sub-microsecond truncated)."""
    return (_EPOCH + timedelta(microseconds=ts // NS_PER_MICROSECOND)).astimezone(tz)


def epoch_to_calendar_day(ts: int, tz: tzinfo = timezone.utc) -> str:
    """Calendar day of ``ts`` in ``tz`` as YYYY-MM-DD."""
    return epoch_to_datetime(ts, tz).date().isoformat()


def epoch_to_calendar_month(ts: int, tz: tzinfo = timezone.utc) -> str:
    """Calendar month of ``ts`` in ``tz`` as YYYY-MM."""
    return epoch_to_calendar_day(ts, tz)[:7]


# --- Calendar dates ---


def parse_calendar_date(date_str: str) -> date:
    """Parse a strict YYYY-MM-DD string. Raises InvalidDate."""
    if not isinstance(date_str, str) or not _DATE_PATTERN.fullmatch(date_str):
        raise InvalidDate(date_str)
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        raise InvalidDate(date_str) from None


def is_valid_date(date_str: str) -> bool:
    try:
        parse_calendar_date(date_str)
    except InvalidDate:
        return False
    return True


def date_to_epoch(date_str: str, tz: tzinfo = timezone.utc) -> int:
    """Nanosecond timestamp of midnight at the start of ``date_str`` in ``tz``.

    Whole-day granularity only; the wall-clock midnight is taken in ``tz``.
    """
    day = parse_calendar_date(date_str)
    return datetime_to_epoch(datetime.combine(day, time.min, tzinfo=tz))


def month_bounds(month: str, tz: tzinfo = timezone.utc) -> tuple[int, int]:
    """[start, end) nanosecond bounds of a YYYY-MM month in ``tz``."""
    match = _MONTH_PATTERN.fullmatch(month) if isinstance(month, str) else None
    if match is None:
        raise InvalidDate(month, expected="YYYY-MM")
    year, month_num = int(match.group(1)), int(match.group(2))
    start = datetime(year, month_num, 1, tzinfo=tz)
    if month_num == 12:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month_num + 1, 1, tzinfo=tz)
    return datetime_to_epoch(start), datetime_to_epoch(end)


def is_valid_month(month: str) -> bool:
    return isinstance(month, str) and _MONTH_PATTERN.fullmatch(month) is not None


# --- Display formatting ---


def format_duration(minutes: int) -> str:
    """90 -> '1:30' (hours are not wrapped at 24)."""
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours}:{mins:02d}"


def format_hours(minutes: int) -> str:
    """Minute total for dashboards: 750 -> '12h 30m', 45 -> '45m', 180 -> '3h'."""
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"
