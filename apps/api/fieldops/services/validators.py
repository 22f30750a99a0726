from datetime import date
from typing import Iterable, Optional

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.schemas.availability import WeeklyScheduleEntry


def validate_schedule_entries(entries: Iterable[WeeklyScheduleEntry]) -> None:
    # One active row per weekday; inactive rows are kept for history
    seen: set[int] = set()
    for e in entries:
        if not e.is_active:
            continue
        if e.day_of_week in seen:
            raise SchedulingValidationError(f"more than one active schedule entry for day_of_week={e.day_of_week}")
        seen.add(e.day_of_week)


def find_overlapping_window(windows: Iterable, start_date: date, end_date: date, exclude_id=None) -> Optional[object]:
    """First stored seasonal window sharing at least one day with [start_date, end_date]."""
    for w in windows:
        if exclude_id is not None and w.seasonal_availability_id == exclude_id:
            continue
        if w.start_date <= end_date and start_date <= w.end_date:
            return w
    return None
