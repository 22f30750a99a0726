import logging
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.models.appointment import Appointment
from fieldops.models.worker import Worker
from fieldops.scheduling.clock import require_interval, to_local
from fieldops.scheduling.conflicts import find_next_available_slot, has_conflict, weekly_capacity
from fieldops.schemas.appointments import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentReschedule,
    AppointmentStatus,
    ConflictResult,
    WorkerCapacity,
    WorkerCapacityInput,
)
from fieldops.services.availability_service import (
    check_worker_availability,
    company_timezone,
    load_appointments,
    require_company,
    require_worker,
    to_stored,
)

logger = logging.getLogger(__name__)


def appointment_out(apt: Appointment, tz_name: str, warning: Optional[str] = None) -> AppointmentOut:
    return AppointmentOut(
        appointment_id=apt.appointment_id,
        company_id=apt.company_id,
        worker_id=apt.worker_id,
        title=apt.title,
        start_time=to_stored(apt.start_time, tz_name),
        end_time=to_stored(apt.end_time, tz_name),
        status=apt.status,
        availability_warning=warning,
    )


def check_conflict(
    db: Session,
    worker_id: UUID,
    start: datetime,
    end: datetime,
    tz_name: str,
    exclude_appointment_id: Optional[UUID] = None,
) -> ConflictResult:
    require_interval(start, end)
    appointments = load_appointments(db, tz_name, worker_ids=[worker_id])
    return has_conflict(
        worker_id,
        to_local(start, tz_name),
        to_local(end, tz_name),
        appointments,
        exclude_appointment_id=exclude_appointment_id,
    )


def _require_company_worker(db: Session, worker_id: UUID, company_id: UUID) -> Worker:
    worker = require_worker(db, worker_id)
    if worker.company_id != company_id:
        raise HTTPException(status_code=404, detail="Worker not found")
    return worker


def _vet_assignment(
    db: Session,
    worker: Worker,
    start: datetime,
    end: datetime,
    tz_name: str,
    exclude_appointment_id: Optional[UUID] = None,
) -> Optional[str]:
    """Raises 409 on a double booking; returns the availability reason as a warning."""
    conflict = check_conflict(db, worker.worker_id, start, end, tz_name, exclude_appointment_id)
    if conflict.conflict:
        logger.info(f"Rejected booking for worker {worker.worker_id}: {conflict.reason}")
        raise HTTPException(status_code=409, detail=conflict.reason)

    availability = check_worker_availability(db, worker, start, end)
    return None if availability.available else availability.reason


def create_appointment(db: Session, payload: AppointmentCreate) -> AppointmentOut:
    company = require_company(db, payload.company_id)
    tz_name = company.timezone or settings.default_timezone

    warning = None
    if payload.worker_id is not None:
        worker = _require_company_worker(db, payload.worker_id, company.company_id)
        # Cancelled bookings never take part in conflict checks
        if payload.status != AppointmentStatus.cancelled:
            warning = _vet_assignment(db, worker, payload.start_time, payload.end_time, tz_name)

    apt = Appointment(
        company_id=company.company_id,
        worker_id=payload.worker_id,
        title=payload.title,
        start_time=to_stored(payload.start_time, tz_name),
        end_time=to_stored(payload.end_time, tz_name),
        status=payload.status,
        location_lat=payload.location_lat,
        location_lng=payload.location_lng,
        gps_check_in_radius=payload.gps_check_in_radius or settings.default_gps_check_in_radius,
    )
    db.add(apt)
    db.commit()
    db.refresh(apt)

    logger.info(f"Created appointment {apt.appointment_id} for worker {apt.worker_id}")
    return appointment_out(apt, tz_name, warning)


def reschedule_appointment(db: Session, appointment_id: UUID, payload: AppointmentReschedule) -> AppointmentOut:
    apt = db.get(Appointment, appointment_id)
    if not apt:
        raise HTTPException(status_code=404, detail="Appointment not found")
    tz_name = company_timezone(db, apt.company_id)

    worker_id = payload.worker_id or apt.worker_id
    status = payload.status or apt.status
    warning = None
    if worker_id is not None:
        worker = _require_company_worker(db, worker_id, apt.company_id)
        if status != AppointmentStatus.cancelled:
            warning = _vet_assignment(
                db, worker, payload.start_time, payload.end_time, tz_name, exclude_appointment_id=apt.appointment_id
            )

    apt.worker_id = worker_id
    apt.start_time = to_stored(payload.start_time, tz_name)
    apt.end_time = to_stored(payload.end_time, tz_name)
    apt.status = status
    db.commit()
    db.refresh(apt)

    logger.info(f"Rescheduled appointment {apt.appointment_id}")
    return appointment_out(apt, tz_name, warning)


def next_available_slot(
    db: Session, worker: Worker, start: datetime, duration: timedelta
) -> Optional[tuple[datetime, datetime]]:
    tz_name = company_timezone(db, worker.company_id)
    appointments = load_appointments(db, tz_name, worker_ids=[worker.worker_id])
    slot = find_next_available_slot(
        worker.worker_id,
        to_local(start, tz_name),
        duration,
        appointments,
        max_attempts=settings.next_slot_max_attempts,
    )
    if slot is None:
        return None
    return to_stored(slot[0], tz_name), to_stored(slot[1], tz_name)


def company_capacity(db: Session, company_id: UUID, week_start: date) -> list[WorkerCapacity]:
    company = require_company(db, company_id)
    tz_name = company.timezone or settings.default_timezone

    workers = db.execute(
        select(Worker).where(Worker.company_id == company_id, Worker.is_active.is_(True))
    ).scalars().all()
    inputs = [
        WorkerCapacityInput(
            worker_id=w.worker_id,
            name=w.name,
            employment_type=w.employment_type,
            standard_work_hours=float(w.standard_work_hours) if w.standard_work_hours is not None else None,
        )
        for w in workers
    ]
    appointments = load_appointments(db, tz_name, company_id=company_id)
    return weekly_capacity(inputs, appointments, week_start, week_start + timedelta(days=6))
