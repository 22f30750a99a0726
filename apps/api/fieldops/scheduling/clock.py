from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from fieldops.scheduling.errors import SchedulingValidationError

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def day_of_week(d: date) -> int:
    """0=Sun ... 6=Sat (the convention stored in worker_schedule)."""
    return (d.weekday() + 1) % 7


def to_local(dt: datetime, tz_name: str) -> datetime:
    """Aware instant -> tenant wall-clock (naive). Naive input is taken as already local."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def localize(dt: datetime, tz_name: str) -> datetime:
    """Tenant wall-clock (naive) -> aware instant. Aware input is returned unchanged."""
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=ZoneInfo(tz_name))


def require_interval(start: datetime, end: datetime) -> None:
    if start is None or end is None:
        raise SchedulingValidationError("start and end are required")
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise SchedulingValidationError("start and end must both be timezone-aware or both naive")
    if start >= end:
        raise SchedulingValidationError("end must be after start")


def daterange(start: date, end: date):
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0


def fmt_hhmm(t: time) -> str:
    return t.strftime("%H:%M")
