"""
Tests for the month calendar and weekly worker ordering.
"""
from datetime import date, datetime, time
from uuid import uuid4

from fieldops.scheduling.board import rank_workers_for_week, summarize_day, summarize_month, week_status
from fieldops.schemas.appointments import AppointmentSnapshot, AppointmentStatus
from fieldops.schemas.availability import (
    SeasonalDateOverride,
    SeasonalWindow,
    UnavailabilityPeriod,
    WeeklyScheduleEntry,
    WorkerAvailabilityProfile,
)

# Week of Monday 2024-12-16
MONDAY = date(2024, 12, 16)


def make_profile(name="Sam", unavailability=(), seasonal=(), schedule=True):
    entries = [WeeklyScheduleEntry(day_of_week=d, start_time=time(7), end_time=time(15)) for d in range(1, 6)]
    return WorkerAvailabilityProfile(
        worker_id=uuid4(),
        name=name,
        schedule=entries if schedule else [],
        unavailability=list(unavailability),
        seasonal_windows=list(seasonal),
    )


class TestSummarizeDay:
    def test_scheduled_day_with_assigned_hours(self):
        p = make_profile()
        appointments = [
            AppointmentSnapshot(
                appointment_id=uuid4(), worker_id=p.worker_id, start=datetime(2024, 12, 16, 9), end=datetime(2024, 12, 16, 11, 30)
            ),
            AppointmentSnapshot(
                appointment_id=uuid4(),
                worker_id=p.worker_id,
                start=datetime(2024, 12, 16, 12),
                end=datetime(2024, 12, 16, 13),
                status=AppointmentStatus.cancelled,
            ),
        ]
        day = summarize_day(p, MONDAY, appointments)
        assert day.is_available is True
        assert day.available_hours == 8
        assert day.assigned_hours == 2.5

    def test_seasonal_periods_set_capacity(self):
        window = SeasonalWindow(
            seasonal_id=uuid4(),
            name="Summer",
            start_date=date(2024, 12, 1),
            end_date=date(2024, 12, 31),
            dates=[SeasonalDateOverride(date=MONDAY, periods=["morning", "evening"])],
        )
        p = make_profile(seasonal=[window])

        day = summarize_day(p, MONDAY)
        assert day.is_seasonal_override is True
        assert day.available_hours == 10
        assert day.start_time == time(6)

        other = summarize_day(p, date(2024, 12, 17))
        assert other.is_available is False
        assert other.unavailability_reason == "Not available (Summer)"

    def test_whole_day_unavailability(self):
        p = make_profile(
            unavailability=[UnavailabilityPeriod(start_date=MONDAY, end_date=MONDAY, reason="Medical")]
        )
        day = summarize_day(p, MONDAY)
        assert day.is_available is False
        assert day.is_unavailable is True
        assert day.unavailability_reason == "Medical"

    def test_month_has_every_day(self):
        month = summarize_month(make_profile(), date(2024, 12, 9))
        assert len(month.days) == 31
        assert month.days[0].date == date(2024, 12, 1)
        # 2024-12-01 is a Sunday
        assert month.days[0].is_available is False


class TestWeekStatus:
    def test_no_schedule(self):
        status = week_status(make_profile(schedule=False), MONDAY)
        assert status.status == "unavailable"
        assert status.reason == "No schedule set"

    def test_partial_week(self):
        p = make_profile(
            unavailability=[UnavailabilityPeriod(start_date=MONDAY, end_date=date(2024, 12, 17), reason="Leave")]
        )
        status = week_status(p, MONDAY)
        assert status.status == "partial"
        assert status.reason == "Available 3/5 days (Leave)"

    def test_whole_week_without_reason(self):
        p = make_profile(unavailability=[UnavailabilityPeriod(start_date=MONDAY, end_date=date(2024, 12, 22))])
        status = week_status(p, MONDAY)
        assert status.status == "unavailable"
        assert status.reason == "Unavailable all week"

    def test_ranking(self):
        away = make_profile(
            name="Alex", unavailability=[UnavailabilityPeriod(start_date=MONDAY, end_date=date(2024, 12, 22))]
        )
        partial = make_profile(
            name="Bea", unavailability=[UnavailabilityPeriod(start_date=MONDAY, end_date=MONDAY)]
        )
        free = make_profile(name="Cam")
        ranked = rank_workers_for_week([away, partial, free], MONDAY)
        assert [s.name for s in ranked] == ["Cam", "Bea", "Alex"]
