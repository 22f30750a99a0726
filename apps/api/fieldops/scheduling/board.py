"""
Calendar overviews: per-day availability for a month and a weekly status
used to order workers on the scheduling board.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable

from fieldops.scheduling.availability import select_seasonal_window
from fieldops.scheduling.clock import day_of_week, daterange, hours_between
from fieldops.scheduling.periods import PERIOD_DISPLAY_HOURS, Period, capacity_hours
from fieldops.schemas.appointments import AppointmentSnapshot
from fieldops.schemas.availability import (
    DayAvailability,
    WorkerAvailabilityProfile,
    WorkerMonthAvailability,
    WorkerWeekStatus,
)

_STATUS_ORDER = {"available": 0, "partial": 1, "unavailable": 2}


def month_bounds(month: date) -> tuple[date, date]:
    first = month.replace(day=1)
    last = month.replace(day=calendar.monthrange(month.year, month.month)[1])
    return first, last


def _assigned_hours(profile: WorkerAvailabilityProfile, d: date, appointments: list[AppointmentSnapshot]) -> float:
    return round(
        sum(
            hours_between(a.start, a.end)
            for a in appointments
            if a.worker_id == profile.worker_id and not a.is_cancelled and not a.is_degenerate and a.start.date() == d
        ),
        2,
    )


def summarize_day(
    profile: WorkerAvailabilityProfile,
    d: date,
    appointments: Iterable[AppointmentSnapshot] = (),
) -> DayAvailability:
    appointments = list(appointments)
    dow = day_of_week(d)
    assigned = _assigned_hours(profile, d, appointments)

    # Seasonal windows settle the day on their own, same as the resolver
    window = select_seasonal_window(profile.seasonal_windows, d)
    if window is not None:
        override = window.override_for(d)
        periods = list(override.periods) if override else []
        if not periods:
            return DayAvailability(
                date=d,
                day_of_week=dow,
                is_available=False,
                unavailability_reason=f"Not available ({window.name})",
                assigned_hours=assigned,
                is_seasonal_override=True,
            )

        first = Period.anytime if Period.anytime in periods else periods[0]
        start_t, end_t = PERIOD_DISPLAY_HOURS[first]
        return DayAvailability(
            date=d,
            day_of_week=dow,
            is_available=True,
            start_time=start_t,
            end_time=end_t,
            available_hours=capacity_hours(periods),
            assigned_hours=assigned,
            seasonal_periods=periods,
            is_seasonal_override=True,
        )

    whole_day = next((u for u in profile.unavailability if u.covers(d) and not u.is_timed), None)
    if whole_day is not None:
        return DayAvailability(
            date=d,
            day_of_week=dow,
            is_available=False,
            is_unavailable=True,
            unavailability_reason=whole_day.reason,
            assigned_hours=assigned,
        )

    entry = profile.schedule_for(dow)
    if entry is not None:
        span = hours_between(datetime.combine(d, entry.start_time), datetime.combine(d, entry.end_time))
        return DayAvailability(
            date=d,
            day_of_week=dow,
            is_available=True,
            start_time=entry.start_time,
            end_time=entry.end_time,
            available_hours=round(span, 2),
            assigned_hours=assigned,
        )

    return DayAvailability(date=d, day_of_week=dow, is_available=False, assigned_hours=assigned)


def summarize_month(
    profile: WorkerAvailabilityProfile,
    month: date,
    appointments: Iterable[AppointmentSnapshot] = (),
) -> WorkerMonthAvailability:
    appointments = list(appointments)
    first, last = month_bounds(month)
    return WorkerMonthAvailability(
        worker_id=profile.worker_id,
        name=profile.name,
        days=[summarize_day(profile, d, appointments) for d in daterange(first, last)],
    )


def week_status(profile: WorkerAvailabilityProfile, week_start: date) -> WorkerWeekStatus:
    scheduled_days = 0
    unavailable_days = 0
    unavailable_reason = ""

    for d in daterange(week_start, week_start + timedelta(days=6)):
        if profile.schedule_for(day_of_week(d)) is None:
            continue
        scheduled_days += 1

        blocking = next((u for u in profile.unavailability if u.covers(d)), None)
        if blocking is not None:
            unavailable_days += 1
            if blocking.reason and not unavailable_reason:
                unavailable_reason = blocking.reason

    if scheduled_days == 0:
        status, reason = "unavailable", "No schedule set"
    elif unavailable_days == scheduled_days:
        status, reason = "unavailable", unavailable_reason or "Unavailable all week"
    elif unavailable_days > 0:
        available_days = scheduled_days - unavailable_days
        suffix = f" ({unavailable_reason})" if unavailable_reason else ""
        status, reason = "partial", f"Available {available_days}/{scheduled_days} days{suffix}"
    else:
        status, reason = "available", None

    return WorkerWeekStatus(worker_id=profile.worker_id, name=profile.name, status=status, reason=reason)


def rank_workers_for_week(profiles: Iterable[WorkerAvailabilityProfile], week_start: date) -> list[WorkerWeekStatus]:
    statuses = [week_status(p, week_start) for p in profiles]
    statuses.sort(key=lambda s: (_STATUS_ORDER[s.status], s.name.lower()))
    return statuses
