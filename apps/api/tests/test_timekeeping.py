"""
Tests for GPS check-in verification and labour costing.
"""
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.scheduling.timekeeping import (
    compute_time_log_totals,
    distance_warning_level,
    format_distance,
    haversine_meters,
    summarize_time_logs,
    verify_check_in,
)
from fieldops.schemas.time_logs import DistanceWarningLevel, GeoPoint, TimeLogSnapshot, TimeLogStatus

SITE = GeoPoint(lat=0.0, lng=0.0)


class TestDistance:
    def test_one_thousandth_of_a_degree_of_latitude(self):
        assert haversine_meters(0, 0, 0.001, 0) == pytest.approx(111.19, abs=0.01)

    def test_same_point(self):
        assert haversine_meters(-33.86, 151.21, -33.86, 151.21) == pytest.approx(0.0)

    @pytest.mark.parametrize(
        "meters,level",
        [
            (120, DistanceWarningLevel.ok),
            (500, DistanceWarningLevel.ok),
            (600, DistanceWarningLevel.warning),
            (2500, DistanceWarningLevel.danger),
        ],
    )
    def test_warning_levels(self, meters, level):
        assert distance_warning_level(meters) == level

    def test_format_distance(self):
        assert format_distance(350) == "350m"
        assert format_distance(1234) == "1.2km"


class TestVerifyCheckIn:
    def test_outside_radius_is_blocked(self):
        result = verify_check_in(SITE, GeoPoint(lat=0.001, lng=0.0), 100)
        assert result.allowed is False
        assert result.distance_meters == 111
        assert result.reason == "You must be within 100m of the job site to check in. You are 111m away."

    def test_inside_radius(self):
        result = verify_check_in(SITE, GeoPoint(lat=0.0005, lng=0.0), 100)
        assert result.allowed is True
        assert result.level == DistanceWarningLevel.ok

    def test_unknown_site_is_allowed(self):
        result = verify_check_in(None, GeoPoint(lat=1.0, lng=1.0), 100)
        assert result.allowed is True
        assert result.reason == "Appointment GPS location not available"


class TestTotals:
    def test_cost_includes_overhead(self):
        hours, cost = compute_time_log_totals(
            datetime(2025, 2, 3, 8, 0), datetime(2025, 2, 3, 12, 30), Decimal("40"), Decimal("30")
        )
        assert hours == Decimal("4.50")
        assert cost == Decimal("234.00")

    def test_open_log(self):
        assert compute_time_log_totals(datetime(2025, 2, 3, 8), None, Decimal("40"), Decimal("0")) == (None, None)

    def test_clock_out_before_clock_in(self):
        with pytest.raises(SchedulingValidationError):
            compute_time_log_totals(datetime(2025, 2, 3, 8), datetime(2025, 2, 3, 7), Decimal("40"), Decimal("0"))


class TestSummary:
    def test_counts_far_check_ins(self):
        appointment_id = uuid4()
        near = TimeLogSnapshot(
            time_log_id=uuid4(),
            appointment_id=appointment_id,
            worker_id=uuid4(),
            clock_in=datetime(2025, 2, 3, 8),
            total_hours=Decimal("2.00"),
            total_cost=Decimal("100.00"),
            status=TimeLogStatus.completed,
            check_in=GeoPoint(lat=0.0001, lng=0.0),
        )
        far = near.model_copy(
            update={"time_log_id": uuid4(), "worker_id": uuid4(), "check_in": GeoPoint(lat=0.03, lng=0.0)}
        )

        summary = summarize_time_logs(appointment_id, [near, far], SITE)

        assert summary.total_hours == Decimal("4.00")
        assert summary.total_cost == Decimal("200.00")
        assert summary.worker_count == 2
        assert summary.distance_warnings == 1
        assert summary.logs[1].check_in_level == DistanceWarningLevel.danger

    def test_no_site(self):
        summary = summarize_time_logs(uuid4(), [], None)
        assert summary.location_available is False
        assert summary.distance_warnings == 0
