"""
Date-range windows for discover.

Every window starts at ``now`` (inclusive) and ends at an inclusive upper
bound, or is open-ended for ``upcoming``:

    today     [now, 23:59:59.999999 of now's calendar day in the campus timezone]
    week      [now, now + 7 days]
    month     [now, now + 1 calendar month]
    upcoming  [now, +inf)
"""
import calendar
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo

Window = Tuple[datetime, Optional[datetime]]


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def campus_timezone(name: str) -> tzinfo:
    """tzinfo for an IANA zone name; "UTC" needs no zone database."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def resolve_window(date_range: str, now: datetime, tz: Optional[tzinfo] = None) -> Window:
    """
    (start, end) bounds for a date-range keyword; unknown keywords mean upcoming.

    ``tz`` decides which calendar day "today" is; it defaults to now's own zone.
    """
    if date_range == "today":
        local_now = now.astimezone(tz) if tz is not None else now
        return now, end_of_day(local_now)
    if date_range == "week":
        return now, now + timedelta(days=7)
    if date_range == "month":
        return now, add_months(now, 1)
    return now, None


def start_time_condition(date_range: str, now: datetime, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
    """Mongo condition on ``startTime`` for the window."""
    start, end = resolve_window(date_range, now, tz)
    condition: Dict[str, Any] = {"$gte": start}
    if end is not None:
        condition["$lte"] = end
    return condition

