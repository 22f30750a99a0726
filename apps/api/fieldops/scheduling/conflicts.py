from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID

from fieldops.scheduling.clock import fmt_hhmm, hours_between, require_interval
from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.schemas.appointments import (
    AppointmentSnapshot,
    ConflictResult,
    WorkerCapacity,
    WorkerCapacityInput,
)

logger = logging.getLogger(__name__)

FULL_TIME_STANDARD_HOURS = 40.0


def overlaps(start: datetime, end: datetime, apt_start: datetime, apt_end: datetime) -> bool:
    """
    Three-way overlap test against an existing [apt_start, apt_end):
      - proposed start falls inside it (start inclusive, end exclusive)
      - proposed end falls inside it (start exclusive, end inclusive)
      - proposed interval swallows it
    Intervals that only touch at an endpoint do not overlap.
    """
    return (
        (apt_start <= start < apt_end)
        or (apt_start < end <= apt_end)
        or (start <= apt_start and end >= apt_end)
    )


def _worker_appointments(
    worker_id: UUID,
    appointments: Iterable[AppointmentSnapshot],
    exclude_appointment_id: Optional[UUID] = None,
) -> list[AppointmentSnapshot]:
    return [
        a
        for a in appointments
        if a.worker_id == worker_id
        and not a.is_cancelled
        and not a.is_degenerate
        and (exclude_appointment_id is None or a.appointment_id != exclude_appointment_id)
    ]


def _require_comparable(start: datetime, candidates: list[AppointmentSnapshot]) -> None:
    aware = start.tzinfo is not None
    for apt in candidates:
        if (apt.start.tzinfo is not None) != aware or (apt.end.tzinfo is not None) != aware:
            raise SchedulingValidationError(
                "proposed interval and existing appointments must both be timezone-aware or both naive"
            )


def _first_clash(start: datetime, end: datetime, candidates: list[AppointmentSnapshot]) -> Optional[AppointmentSnapshot]:
    for apt in candidates:
        if overlaps(start, end, apt.start, apt.end):
            return apt
    return None


def has_conflict(
    worker_id: Optional[UUID],
    start: datetime,
    end: datetime,
    appointments: Iterable[AppointmentSnapshot],
    exclude_appointment_id: Optional[UUID] = None,
) -> ConflictResult:
    if worker_id is None:
        raise SchedulingValidationError("worker_id is required")
    require_interval(start, end)

    candidates = _worker_appointments(worker_id, appointments, exclude_appointment_id)
    _require_comparable(start, candidates)
    clash = _first_clash(start, end, candidates)
    if clash is None:
        return ConflictResult(conflict=False)

    title = f" ({clash.title})" if clash.title else ""
    return ConflictResult(
        conflict=True,
        reason=(
            f"Worker already has an appointment{title} from "
            f"{fmt_hhmm(clash.start.time())} to {fmt_hhmm(clash.end.time())} on {clash.start.date().isoformat()}"
        ),
        conflicting_appointment_id=clash.appointment_id,
    )


def find_next_available_slot(
    worker_id: Optional[UUID],
    start: datetime,
    duration: timedelta,
    appointments: Iterable[AppointmentSnapshot],
    max_attempts: int = 20,
    exclude_appointment_id: Optional[UUID] = None,
) -> Optional[tuple[datetime, datetime]]:
    """Push the candidate past each clashing appointment until it fits or attempts run out."""
    if worker_id is None:
        raise SchedulingValidationError("worker_id is required")
    if start is None:
        raise SchedulingValidationError("start is required")
    if duration <= timedelta(0):
        raise SchedulingValidationError("duration must be positive")

    candidates = _worker_appointments(worker_id, appointments, exclude_appointment_id)
    _require_comparable(start, candidates)
    candidates.sort(key=lambda a: a.start)

    slot_start = start
    for _ in range(max_attempts):
        slot_end = slot_start + duration
        clash = _first_clash(slot_start, slot_end, candidates)
        if clash is None:
            return slot_start, slot_end
        slot_start = clash.end

    logger.debug(f"No free slot for worker {worker_id} after {max_attempts} attempts from {start}")
    return None


def weekly_capacity(
    workers: Iterable[WorkerCapacityInput],
    appointments: Iterable[AppointmentSnapshot],
    week_start: date,
    week_end: date,
) -> list[WorkerCapacity]:
    """Workers with spare hours in [week_start, week_end], most available first."""
    if week_end < week_start:
        raise SchedulingValidationError("week_end must be >= week_start")

    appointments = list(appointments)
    result: list[WorkerCapacity] = []

    for w in workers:
        if w.standard_work_hours:
            standard = float(w.standard_work_hours)
        elif w.employment_type == "full_time":
            standard = FULL_TIME_STANDARD_HOURS
        else:
            standard = 0.0

        scheduled = sum(
            hours_between(a.start, a.end)
            for a in appointments
            if a.worker_id == w.worker_id
            and not a.is_cancelled
            and not a.is_degenerate
            and week_start <= a.start.date() <= week_end
        )

        available = max(0.0, standard - scheduled)
        if available > 0:
            result.append(
                WorkerCapacity(
                    worker_id=w.worker_id,
                    name=w.name,
                    standard_hours=standard,
                    scheduled_hours=round(scheduled, 2),
                    available_hours=round(available, 2),
                )
            )

    result.sort(key=lambda c: (-c.available_hours, c.name))
    return result
