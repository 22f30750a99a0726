"""
GPS verification and labour costing for time logs.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional
from uuid import UUID

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.schemas.time_logs import (
    CheckInVerification,
    DistanceWarningLevel,
    GeoPoint,
    TimeLogDistance,
    TimeLogSnapshot,
    TimeLogSummary,
)

EARTH_RADIUS_METERS = 6371e3

DEFAULT_WARNING_METERS = 500.0
DEFAULT_DANGER_METERS = 2000.0

CENTS = Decimal("0.01")


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_meters(a.lat, a.lng, b.lat, b.lng)


def distance_warning_level(
    meters: float,
    warning_meters: float = DEFAULT_WARNING_METERS,
    danger_meters: float = DEFAULT_DANGER_METERS,
) -> DistanceWarningLevel:
    if meters > danger_meters:
        return DistanceWarningLevel.danger
    if meters > warning_meters:
        return DistanceWarningLevel.warning
    return DistanceWarningLevel.ok


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"


def verify_check_in(
    site: Optional[GeoPoint],
    position: Optional[GeoPoint],
    radius_meters: int,
    warning_meters: float = DEFAULT_WARNING_METERS,
    danger_meters: float = DEFAULT_DANGER_METERS,
) -> CheckInVerification:
    """Only blocks when both positions are known and the worker is outside the radius."""
    if site is None or position is None:
        return CheckInVerification(
            allowed=True,
            radius_meters=radius_meters,
            reason="Appointment GPS location not available" if site is None else "Current location not available",
        )

    distance = round(distance_between(site, position))
    level = distance_warning_level(distance, warning_meters, danger_meters)

    if distance > radius_meters:
        return CheckInVerification(
            allowed=False,
            distance_meters=distance,
            radius_meters=radius_meters,
            level=level,
            reason=(
                f"You must be within {radius_meters}m of the job site to check in. "
                f"You are {format_distance(distance)} away."
            ),
        )

    return CheckInVerification(allowed=True, distance_meters=distance, radius_meters=radius_meters, level=level)


def compute_time_log_totals(
    clock_in: datetime,
    clock_out: Optional[datetime],
    hourly_rate: Decimal,
    overhead_percentage: Decimal,
) -> tuple[Optional[Decimal], Optional[Decimal]]:
    """(total_hours, total_cost); cost = (rate + rate * overhead%) * hours."""
    if clock_out is None:
        return None, None
    if clock_out <= clock_in:
        raise SchedulingValidationError("clock_out must be after clock_in")

    hourly_rate = Decimal(str(hourly_rate))
    overhead_percentage = Decimal(str(overhead_percentage))

    hours = Decimal((clock_out - clock_in).total_seconds()) / Decimal(3600)
    loaded_rate = hourly_rate + hourly_rate * overhead_percentage / Decimal(100)
    cost = (loaded_rate * hours).quantize(CENTS, rounding=ROUND_HALF_UP)
    return hours.quantize(CENTS, rounding=ROUND_HALF_UP), cost


def summarize_time_logs(
    appointment_id: UUID,
    logs: Iterable[TimeLogSnapshot],
    site: Optional[GeoPoint],
    warning_meters: float = DEFAULT_WARNING_METERS,
    danger_meters: float = DEFAULT_DANGER_METERS,
) -> TimeLogSummary:
    logs = list(logs)
    total_hours = Decimal("0")
    total_cost = Decimal("0")
    warnings = 0
    per_log: list[TimeLogDistance] = []

    for log in logs:
        total_hours += log.total_hours or Decimal("0")
        total_cost += log.total_cost or Decimal("0")

        row = TimeLogDistance(time_log_id=log.time_log_id, worker_id=log.worker_id)
        if site is not None and log.check_in is not None:
            d = distance_between(site, log.check_in)
            row.check_in_distance_meters = round(d, 1)
            row.check_in_level = distance_warning_level(d, warning_meters, danger_meters)
            if d > danger_meters:
                warnings += 1
        if site is not None and log.check_out is not None:
            d = distance_between(site, log.check_out)
            row.check_out_distance_meters = round(d, 1)
            row.check_out_level = distance_warning_level(d, warning_meters, danger_meters)
        per_log.append(row)

    return TimeLogSummary(
        appointment_id=appointment_id,
        total_hours=total_hours,
        total_cost=total_cost,
        worker_count=len({log.worker_id for log in logs}),
        distance_warnings=warnings,
        location_available=site is not None,
        logs=per_log,
    )
