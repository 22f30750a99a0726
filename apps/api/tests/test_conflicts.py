"""
Tests for double-booking detection, next-slot search and weekly capacity.
"""
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from fieldops.scheduling.conflicts import find_next_available_slot, has_conflict, overlaps, weekly_capacity
from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.schemas.appointments import AppointmentSnapshot, AppointmentStatus, WorkerCapacityInput

WORKER = uuid4()


def apt(start, end, worker_id=WORKER, status=AppointmentStatus.scheduled, title="Switchboard upgrade"):
    return AppointmentSnapshot(
        appointment_id=uuid4(), worker_id=worker_id, title=title, start=start, end=end, status=status
    )


def at(hour, minute=0, day=16):
    return datetime(2024, 12, day, hour, minute)


class TestOverlap:
    def test_touching_intervals_do_not_conflict(self):
        existing = [apt(at(9), at(10))]
        assert has_conflict(WORKER, at(10), at(11), existing).conflict is False
        assert has_conflict(WORKER, at(8), at(9), existing).conflict is False

    @pytest.mark.parametrize(
        "a,b",
        [
            ((at(9), at(11)), (at(10), at(12))),  # partial overlap
            ((at(9), at(12)), (at(10), at(11))),  # containment
            ((at(9), at(10)), (at(9), at(10))),  # identical
        ],
    )
    def test_overlap_is_symmetric(self, a, b):
        assert has_conflict(WORKER, *a, [apt(*b)]).conflict is True
        assert has_conflict(WORKER, *b, [apt(*a)]).conflict is True
        assert overlaps(*a, *b) == overlaps(*b, *a)

    def test_conflict_reason_names_existing_booking(self):
        existing = apt(at(9), at(10, 30))
        result = has_conflict(WORKER, at(10), at(11), [existing])
        assert result.conflict is True
        assert result.conflicting_appointment_id == existing.appointment_id
        assert result.reason == (
            "Worker already has an appointment (Switchboard upgrade) from 09:00 to 10:30 on 2024-12-16"
        )

    def test_cancelled_and_other_workers_ignored(self):
        existing = [
            apt(at(9), at(11), status=AppointmentStatus.cancelled),
            apt(at(9), at(11), worker_id=uuid4()),
        ]
        assert has_conflict(WORKER, at(9), at(10), existing).conflict is False

    def test_excluded_appointment_ignored_when_rescheduling(self):
        existing = apt(at(9), at(11))
        result = has_conflict(WORKER, at(10), at(12), [existing], exclude_appointment_id=existing.appointment_id)
        assert result.conflict is False

    def test_degenerate_existing_appointment_ignored(self):
        assert has_conflict(WORKER, at(9), at(10), [apt(at(9, 30), at(9, 30))]).conflict is False

    def test_missing_worker_rejected(self):
        with pytest.raises(SchedulingValidationError):
            has_conflict(None, at(9), at(10), [])

    def test_inverted_interval_rejected(self):
        with pytest.raises(SchedulingValidationError):
            has_conflict(WORKER, at(10), at(9), [])

    def test_aware_request_against_naive_bookings_rejected(self):
        existing = [apt(at(9), at(10))]
        with pytest.raises(SchedulingValidationError):
            has_conflict(WORKER, at(9).replace(tzinfo=timezone.utc), at(10).replace(tzinfo=timezone.utc), existing)

    def test_aware_request_against_aware_bookings(self):
        utc = timezone.utc
        existing = [apt(at(9).replace(tzinfo=utc), at(10).replace(tzinfo=utc))]
        assert has_conflict(WORKER, at(9, 30).replace(tzinfo=utc), at(11).replace(tzinfo=utc), existing).conflict is True


class TestNextAvailableSlot:
    def test_free_at_requested_time(self):
        assert find_next_available_slot(WORKER, at(8), timedelta(hours=1), []) == (at(8), at(9))

    def test_pushed_past_back_to_back_bookings(self):
        existing = [apt(at(9), at(10)), apt(at(10), at(12))]
        slot = find_next_available_slot(WORKER, at(9, 30), timedelta(hours=2), existing)
        assert slot == (at(12), at(14))

    def test_gives_up_after_max_attempts(self):
        existing = [apt(at(h), at(h + 1)) for h in range(6, 20)]
        assert find_next_available_slot(WORKER, at(6), timedelta(hours=1), existing, max_attempts=3) is None

    def test_missing_worker_rejected(self):
        with pytest.raises(SchedulingValidationError):
            find_next_available_slot(None, at(8), timedelta(hours=1), [])

    def test_mixed_awareness_rejected(self):
        existing = [apt(at(9), at(10))]
        with pytest.raises(SchedulingValidationError):
            find_next_available_slot(WORKER, at(9).replace(tzinfo=timezone.utc), timedelta(hours=1), existing)


class TestWeeklyCapacity:
    def test_full_time_default_and_sorting(self):
        busy = uuid4()
        free = uuid4()
        workers = [
            WorkerCapacityInput(worker_id=busy, name="Busy", employment_type="full_time"),
            WorkerCapacityInput(worker_id=free, name="Free", standard_work_hours=30),
            WorkerCapacityInput(worker_id=uuid4(), name="Casual", employment_type="casual"),
        ]
        appointments = [apt(at(8), at(18), worker_id=busy), apt(at(8, day=17), at(18, day=17), worker_id=busy)]

        result = weekly_capacity(workers, appointments, date(2024, 12, 16), date(2024, 12, 22))

        assert [c.name for c in result] == ["Free", "Busy"]
        assert result[1].scheduled_hours == pytest.approx(20.0)
        assert result[1].available_hours == pytest.approx(20.0)
