"""
Tests for the availability resolver: seasonal windows, the regular weekly
schedule and date-ranged unavailability, evaluated in that order.
"""
from datetime import date, datetime, time
from uuid import uuid4

import pytest

from fieldops.scheduling.availability import (
    AvailabilityResolver,
    RegularScheduleRule,
    SeasonalRule,
    UnavailabilityRule,
    is_available,
    select_seasonal_window,
)
from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.schemas.availability import (
    SeasonalDateOverride,
    SeasonalWindow,
    UnavailabilityPeriod,
    WeeklyScheduleEntry,
    WorkerAvailabilityProfile,
)


def weekday_schedule(start=time(7, 0), end=time(15, 0)):
    # Monday-Friday (1..5 with Sunday = 0)
    return [WeeklyScheduleEntry(day_of_week=d, start_time=start, end_time=end) for d in range(1, 6)]


def summer_window(dates=None, created_at=None, start=date(2024, 12, 1), end=date(2024, 12, 31), name="Summer"):
    return SeasonalWindow(
        seasonal_id=uuid4(),
        name=name,
        start_date=start,
        end_date=end,
        created_at=created_at,
        dates=dates or [],
    )


@pytest.fixture
def profile():
    return WorkerAvailabilityProfile(worker_id=uuid4(), name="Sam", schedule=weekday_schedule())


class TestRegularSchedule:
    def test_inside_working_hours_is_available(self, profile):
        # 2024-12-16 is a Monday
        result = is_available(profile, datetime(2024, 12, 16, 9, 0), datetime(2024, 12, 16, 11, 0))
        assert result.available is True
        assert result.reason is None

    def test_day_not_worked(self, profile):
        # 2024-12-15 is a Sunday
        result = is_available(profile, datetime(2024, 12, 15, 9, 0), datetime(2024, 12, 15, 10, 0))
        assert result.available is False
        assert result.reason == "Sam does not work on Sundays"
        assert result.source == "schedule"

    def test_outside_hours_names_the_shift(self, profile):
        result = is_available(profile, datetime(2024, 12, 16, 14, 0), datetime(2024, 12, 16, 16, 0))
        assert result.available is False
        assert result.reason == "Outside working hours. Sam works 07:00-15:00 on Mondays"

    def test_exact_shift_bounds_are_available(self, profile):
        result = is_available(profile, datetime(2024, 12, 16, 7, 0), datetime(2024, 12, 16, 15, 0))
        assert result.available is True

    def test_inactive_entry_is_ignored(self):
        p = WorkerAvailabilityProfile(
            worker_id=uuid4(),
            name="Sam",
            schedule=[WeeklyScheduleEntry(day_of_week=1, start_time=time(7), end_time=time(15), is_active=False)],
        )
        result = is_available(p, datetime(2024, 12, 16, 9, 0), datetime(2024, 12, 16, 10, 0))
        assert result.available is False

    def test_two_active_entries_for_one_day_rejected(self):
        with pytest.raises(ValueError):
            WorkerAvailabilityProfile(
                worker_id=uuid4(),
                schedule=[
                    WeeklyScheduleEntry(day_of_week=1, start_time=time(7), end_time=time(12)),
                    WeeklyScheduleEntry(day_of_week=1, start_time=time(13), end_time=time(17)),
                ],
            )


class TestUnavailability:
    def test_whole_day_block_with_reason(self, profile):
        profile.unavailability.append(
            UnavailabilityPeriod(start_date=date(2024, 12, 16), end_date=date(2024, 12, 18), reason="Annual leave")
        )
        result = is_available(profile, datetime(2024, 12, 17, 9, 0), datetime(2024, 12, 17, 10, 0))
        assert result.available is False
        assert result.reason == "Sam is unavailable: Annual leave"
        assert result.source == "unavailability"

    def test_timed_block_only_when_window_fully_inside(self, profile):
        profile.unavailability.append(
            UnavailabilityPeriod(
                start_date=date(2024, 12, 16),
                end_date=date(2024, 12, 16),
                start_time=time(9, 0),
                end_time=time(12, 0),
            )
        )
        inside = is_available(profile, datetime(2024, 12, 16, 10, 0), datetime(2024, 12, 16, 11, 0))
        straddling = is_available(profile, datetime(2024, 12, 16, 11, 0), datetime(2024, 12, 16, 13, 0))
        assert inside.available is False
        assert inside.reason == "Sam is unavailable"
        assert straddling.available is True

    def test_schedule_is_checked_before_unavailability(self, profile):
        profile.unavailability.append(
            UnavailabilityPeriod(start_date=date(2024, 12, 15), end_date=date(2024, 12, 15), reason="Wedding")
        )
        result = is_available(profile, datetime(2024, 12, 15, 9, 0), datetime(2024, 12, 15, 10, 0))
        assert result.source == "schedule"


class TestSeasonalWindows:
    def test_summer_example(self, profile):
        """Morning-only override: 09:00 fits, 14:00 does not and names the window."""
        profile.seasonal_windows.append(
            summer_window([SeasonalDateOverride(date=date(2024, 12, 15), periods=["morning"])])
        )

        morning = is_available(profile, datetime(2024, 12, 15, 9, 0), datetime(2024, 12, 15, 10, 0))
        afternoon = is_available(profile, datetime(2024, 12, 15, 14, 0), datetime(2024, 12, 15, 15, 0))

        assert morning.available is True
        assert afternoon.available is False
        assert "Summer" in afternoon.reason
        assert afternoon.reason == "Outside Summer availability. Available: Morning (6am-12pm)"

    def test_seasonal_window_short_circuits_schedule_when_denying(self, profile):
        """A Monday inside the window with no override is unavailable even though the schedule allows it."""
        profile.seasonal_windows.append(summer_window())
        result = is_available(profile, datetime(2024, 12, 16, 9, 0), datetime(2024, 12, 16, 10, 0))
        assert result.available is False
        assert result.source == "seasonal"
        assert result.reason == "Sam is not available on this date (Summer)"

    def test_seasonal_window_never_consults_schedule_or_unavailability(self):
        calls = []

        class Spy:
            def __init__(self, inner):
                self.inner = inner

            def evaluate(self, check):
                calls.append(type(self.inner).__name__)
                return self.inner.evaluate(check)

        resolver = AvailabilityResolver([SeasonalRule(), Spy(RegularScheduleRule()), Spy(UnavailabilityRule())])
        p = WorkerAvailabilityProfile(
            worker_id=uuid4(),
            schedule=weekday_schedule(),
            seasonal_windows=[summer_window([SeasonalDateOverride(date=date(2024, 12, 16), periods=[])])],
        )
        resolver.check(p, datetime(2024, 12, 16, 9, 0), datetime(2024, 12, 16, 10, 0))
        assert calls == []

    def test_anytime_override(self, profile):
        profile.seasonal_windows.append(
            summer_window([SeasonalDateOverride(date=date(2024, 12, 15), periods=["anytime"])])
        )
        result = is_available(profile, datetime(2024, 12, 15, 20, 0), datetime(2024, 12, 15, 21, 0))
        assert result.available is True
        assert result.reason == "Available anytime (Summer)"

    def test_day_level_request_accepts_any_period(self, profile):
        profile.seasonal_windows.append(
            summer_window([SeasonalDateOverride(date=date(2024, 12, 20), periods=["afternoon"])])
        )
        result = is_available(profile, datetime(2024, 12, 20, 6, 0), datetime(2024, 12, 20, 18, 0))
        assert result.available is True
        assert result.reason == "Available during Summer: Afternoon (12pm-6pm)"

    def test_evening_override(self, profile):
        profile.seasonal_windows.append(
            summer_window([SeasonalDateOverride(date=date(2024, 12, 18), periods=["evening"])])
        )
        inside = is_available(profile, datetime(2024, 12, 18, 19, 0), datetime(2024, 12, 18, 20, 0))
        assert inside.available is True

    def test_window_past_midnight_does_not_fit_evening(self, profile):
        """23:00 to 00:30 is compared as running to the end of the 18th, past the 23:59 evening cutoff."""
        profile.seasonal_windows.append(
            summer_window([SeasonalDateOverride(date=date(2024, 12, 18), periods=["evening"])])
        )
        late = is_available(profile, datetime(2024, 12, 18, 23, 0), datetime(2024, 12, 19, 0, 30))
        assert late.available is False
        assert late.reason == "Outside Summer availability. Available: Evening (6pm-12am)"

    def test_most_recently_created_window_wins(self):
        older = summer_window(
            [SeasonalDateOverride(date=date(2024, 12, 10), periods=["anytime"])],
            created_at=datetime(2024, 1, 1),
            name="Old",
        )
        newer = summer_window(
            [],
            created_at=datetime(2024, 6, 1),
            start=date(2024, 12, 5),
            end=date(2024, 12, 20),
            name="New",
        )
        assert select_seasonal_window([older, newer], date(2024, 12, 10)).name == "New"
        assert select_seasonal_window([newer, older], date(2024, 12, 10)).name == "New"
        assert select_seasonal_window([older, newer], date(2024, 12, 25)).name == "Old"


class TestInputValidation:
    def test_missing_worker(self):
        with pytest.raises(SchedulingValidationError):
            is_available(None, datetime(2024, 12, 16, 9), datetime(2024, 12, 16, 10))

    def test_start_after_end(self, profile):
        with pytest.raises(SchedulingValidationError):
            is_available(profile, datetime(2024, 12, 16, 10), datetime(2024, 12, 16, 9))

    def test_mixed_naive_and_aware(self, profile):
        from datetime import timezone

        with pytest.raises(SchedulingValidationError):
            is_available(profile, datetime(2024, 12, 16, 9), datetime(2024, 12, 16, 10, tzinfo=timezone.utc))
