# utils/datetime_utils.py

import math
from datetime import date, datetime
from typing import Optional, Union

from config import get_settings

TimestampLike = Union[str, datetime, date, None]

_DAY_SECONDS = 24 * 60 * 60


def get_timezone():
    return get_settings().tzinfo


def now_local(tz=None) -> datetime:
    return datetime.now(tz or get_timezone())


def localize(dt: datetime, tz=None) -> datetime:
    """Attach the configured timezone to naive values, leave aware values untouched"""
    if dt.tzinfo is not None:
        return dt
    zone = tz or get_timezone()
    if hasattr(zone, "localize"):
        return zone.localize(dt)
    return dt.replace(tzinfo=zone)


def parse_timestamp(value: TimestampLike, tz=None) -> Optional[datetime]:
    """Parse ISO text or date objects into an aware datetime.

    Missing and unparseable values both come back as None so callers can fall
    through to the next candidate instead of failing.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return localize(value, tz)
    if isinstance(value, date):
        return localize(datetime(value.year, value.month, value.day), tz)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    except ValueError:
        return None
    return localize(parsed, tz)


def local_day(dt: datetime, tz=None) -> date:
    """Calendar day of an instant in the configured timezone"""
    aware = localize(dt, tz)
    return aware.astimezone(tz or get_timezone()).date()


def business_days_between(start: datetime, end: datetime, tz=None) -> int:
    """Mon-Fri days in [start, end], both bounds taken as whole calendar days"""
    start = localize(start, tz)
    end = localize(end, tz)
    if end < start:
        return 0

    first = local_day(start, tz)
    last = local_day(end, tz)
    total_days = (last - first).days + 1

    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    weekday = first.weekday()
    for offset in range(remainder):
        if (weekday + offset) % 7 < 5:
            count += 1
    return count


def calendar_days_between(start: datetime, end: datetime, tz=None) -> int:
    """Elapsed days rounded up; any partial day counts as a full one"""
    delta = localize(end, tz) - localize(start, tz)
    return max(math.ceil(delta.total_seconds() / _DAY_SECONDS), 0)


def resolve_endpoint(
    completed_at: TimestampLike,
    due_date: TimestampLike,
    now: Optional[datetime] = None,
    tz=None,
) -> datetime:
    """Effective end of a task: completed-at, else due date, else now"""
    for candidate in (completed_at, due_date):
        parsed = parse_timestamp(candidate, tz)
        if parsed is not None:
            return parsed
    return localize(now, tz) if now is not None else now_local(tz)


def format_date(value: TimestampLike, fmt: str = "%d/%m/%y", tz=None) -> str:
    parsed = parse_timestamp(value, tz)
    if parsed is None:
        return "-"
    return parsed.astimezone(tz or get_timezone()).strftime(fmt)
