"""
Worker availability resolution.

Rules are evaluated in a fixed order and the first one with an opinion wins:

  1. Seasonal windows (date-ranged overrides refined per date)
  2. Regular weekly schedule
  3. Unavailability exceptions

A seasonal window that covers the requested date settles the answer on its
own, whether it allows the booking or not. Regular hours and exceptions are
never consulted for such dates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from fieldops.scheduling.clock import WEEKDAY_NAMES, day_of_week, fmt_hhmm, require_interval
from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.scheduling.periods import (
    DAY_LEVEL_THRESHOLD,
    PERIOD_LABELS,
    Period,
    fits_period,
    period_labels,
)
from fieldops.schemas.availability import AvailabilityResult, SeasonalWindow, WorkerAvailabilityProfile

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999999)


@dataclass(frozen=True)
class AvailabilityCheck:
    profile: WorkerAvailabilityProfile
    start: datetime
    end: datetime

    @property
    def day(self) -> date:
        return self.start.date()

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.day)

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[self.day_of_week]

    @property
    def start_time(self) -> time:
        return self.start.time()

    @property
    def end_time(self) -> time:
        # A window running past midnight is compared as ending at end of day
        if self.end.date() > self.day:
            return END_OF_DAY
        return self.end.time()

    @property
    def is_day_level(self) -> bool:
        return (self.end - self.start) >= DAY_LEVEL_THRESHOLD

    @property
    def worker_label(self) -> str:
        return self.profile.name or "Worker"


class AvailabilityRule(Protocol):
    def evaluate(self, check: AvailabilityCheck) -> Optional[AvailabilityResult]:
        ...


def _window_precedence(w: SeasonalWindow):
    created = w.created_at.timestamp() if w.created_at else float("-inf")
    return (created, w.start_date.toordinal(), str(w.seasonal_id))


def select_seasonal_window(windows: Sequence[SeasonalWindow], d: date) -> Optional[SeasonalWindow]:
    """Most recently created window covering ``d``; later start date, then id, break ties."""
    matching = [w for w in windows if w.covers(d)]
    if not matching:
        return None
    if len(matching) > 1:
        logger.debug(f"{len(matching)} seasonal windows cover {d}; using most recently created")
    return max(matching, key=_window_precedence)


class SeasonalRule:
    def evaluate(self, check: AvailabilityCheck) -> Optional[AvailabilityResult]:
        window = select_seasonal_window(check.profile.seasonal_windows, check.day)
        if window is None:
            return None

        override = window.override_for(check.day)
        periods = list(override.periods) if override else []

        if not periods:
            return AvailabilityResult(
                available=False,
                reason=f"{check.worker_label} is not available on this date ({window.name})",
                available_periods=[],
                source="seasonal",
            )

        if Period.anytime in periods:
            return AvailabilityResult(
                available=True,
                reason=f"Available anytime ({window.name})",
                available_periods=periods,
                source="seasonal",
            )

        if check.is_day_level:
            return AvailabilityResult(
                available=True,
                reason=f"Available during {window.name}: {period_labels(periods)}",
                available_periods=periods,
                source="seasonal",
            )

        start_t, end_t = check.start_time, check.end_time
        if any(fits_period(p, start_t, end_t) for p in periods):
            return AvailabilityResult(available=True, available_periods=periods, source="seasonal")

        allowed = ", ".join(PERIOD_LABELS[p] for p in periods)
        return AvailabilityResult(
            available=False,
            reason=f"Outside {window.name} availability. Available: {allowed}",
            available_periods=periods,
            source="seasonal",
        )


class RegularScheduleRule:
    def evaluate(self, check: AvailabilityCheck) -> Optional[AvailabilityResult]:
        entry = check.profile.schedule_for(check.day_of_week)
        if entry is None:
            return AvailabilityResult(
                available=False,
                reason=f"{check.worker_label} does not work on {check.weekday_name}s",
                source="schedule",
            )

        if check.start_time < entry.start_time or check.end_time > entry.end_time:
            return AvailabilityResult(
                available=False,
                reason=(
                    f"Outside working hours. {check.worker_label} works "
                    f"{fmt_hhmm(entry.start_time)}-{fmt_hhmm(entry.end_time)} on {check.weekday_name}s"
                ),
                source="schedule",
            )
        return None


class UnavailabilityRule:
    def evaluate(self, check: AvailabilityCheck) -> Optional[AvailabilityResult]:
        for period in check.profile.unavailability:
            if not period.covers(check.day):
                continue

            if period.is_timed:
                blocked = period.start_time <= check.start_time and check.end_time <= period.end_time
            else:
                blocked = True

            if blocked:
                reason = f"{check.worker_label} is unavailable"
                if period.reason:
                    reason += f": {period.reason}"
                return AvailabilityResult(available=False, reason=reason, source="unavailability")
        return None


DEFAULT_RULES: tuple[AvailabilityRule, ...] = (SeasonalRule(), RegularScheduleRule(), UnavailabilityRule())


class AvailabilityResolver:
    def __init__(self, rules: Optional[Sequence[AvailabilityRule]] = None):
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def check(
        self,
        profile: Optional[WorkerAvailabilityProfile],
        proposed_start: datetime,
        proposed_end: datetime,
    ) -> AvailabilityResult:
        if profile is None:
            raise SchedulingValidationError("worker is required")
        require_interval(proposed_start, proposed_end)

        check = AvailabilityCheck(profile=profile, start=proposed_start, end=proposed_end)
        for rule in self.rules:
            result = rule.evaluate(check)
            if result is not None:
                return result
        return AvailabilityResult(available=True, source="default")


_default_resolver = AvailabilityResolver()


def is_available(
    profile: Optional[WorkerAvailabilityProfile],
    proposed_start: datetime,
    proposed_end: datetime,
) -> AvailabilityResult:
    return _default_resolver.check(profile, proposed_start, proposed_end)
