"""
Loads worker availability rows into validated profiles and appointment
snapshots in tenant wall-clock time.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.models.appointment import Appointment
from fieldops.models.company import Company
from fieldops.models.seasonal_availability import (
    WorkerSeasonalAvailability,
    WorkerSeasonalAvailabilityDate,
)
from fieldops.models.worker import Worker
from fieldops.models.worker_schedule import WorkerSchedule
from fieldops.models.worker_unavailability import WorkerUnavailability
from fieldops.scheduling.availability import is_available
from fieldops.scheduling.clock import localize, require_interval, to_local
from fieldops.schemas.appointments import AppointmentSnapshot, AppointmentStatus
from fieldops.schemas.availability import (
    AvailabilityResult,
    SeasonalDateOverride,
    SeasonalWindow,
    UnavailabilityPeriod,
    WeeklyScheduleEntry,
    WorkerAvailabilityProfile,
)

logger = logging.getLogger(__name__)


def require_company(db: Session, company_id: UUID) -> Company:
    company = db.get(Company, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


def require_worker(db: Session, worker_id: UUID) -> Worker:
    worker = db.get(Worker, worker_id)
    if not worker:
        raise HTTPException(status_code=404, detail="Worker not found")
    return worker


def company_timezone(db: Session, company_id: UUID) -> str:
    company = db.get(Company, company_id)
    return company.timezone if company and company.timezone else settings.default_timezone


def to_stored(dt: datetime, tz_name: str) -> datetime:
    """Any incoming instant -> aware datetime in the tenant's zone."""
    return localize(to_local(dt, tz_name), tz_name)


def load_seasonal_windows(db: Session, worker_id: UUID) -> list[SeasonalWindow]:
    windows = db.execute(
        select(WorkerSeasonalAvailability).where(WorkerSeasonalAvailability.worker_id == worker_id)
    ).scalars().all()
    if not windows:
        return []

    ids = [w.seasonal_availability_id for w in windows]
    rows = db.execute(
        select(WorkerSeasonalAvailabilityDate)
        .where(WorkerSeasonalAvailabilityDate.seasonal_availability_id.in_(ids))
        .order_by(WorkerSeasonalAvailabilityDate.date.asc())
    ).scalars().all()

    dates_by_window = defaultdict(list)
    for r in rows:
        dates_by_window[r.seasonal_availability_id].append(SeasonalDateOverride(date=r.date, periods=r.periods or []))

    return [
        SeasonalWindow(
            seasonal_id=w.seasonal_availability_id,
            name=w.name,
            start_date=w.start_date,
            end_date=w.end_date,
            created_at=w.created_at,
            dates=dates_by_window[w.seasonal_availability_id],
        )
        for w in windows
    ]


def load_worker_profile(db: Session, worker: Worker) -> WorkerAvailabilityProfile:
    schedule = db.execute(
        select(WorkerSchedule)
        .where(WorkerSchedule.worker_id == worker.worker_id)
        .order_by(WorkerSchedule.day_of_week.asc())
    ).scalars().all()

    unavailability = db.execute(
        select(WorkerUnavailability)
        .where(WorkerUnavailability.worker_id == worker.worker_id)
        .order_by(WorkerUnavailability.start_date.asc())
    ).scalars().all()

    return WorkerAvailabilityProfile(
        worker_id=worker.worker_id,
        name=worker.name,
        schedule=[
            WeeklyScheduleEntry(
                day_of_week=s.day_of_week,
                start_time=s.start_time,
                end_time=s.end_time,
                is_active=s.is_active,
            )
            for s in schedule
        ],
        unavailability=[
            UnavailabilityPeriod(
                start_date=u.start_date,
                end_date=u.end_date,
                start_time=u.start_time,
                end_time=u.end_time,
                reason=u.reason,
                notes=u.notes,
            )
            for u in unavailability
        ],
        seasonal_windows=load_seasonal_windows(db, worker.worker_id),
    )


def load_company_profiles(db: Session, company_id: UUID) -> list[WorkerAvailabilityProfile]:
    workers = db.execute(
        select(Worker)
        .where(Worker.company_id == company_id, Worker.is_active.is_(True))
        .order_by(Worker.name.asc())
    ).scalars().all()
    return [load_worker_profile(db, w) for w in workers]


def appointment_snapshot(apt: Appointment, tz_name: str) -> AppointmentSnapshot:
    return AppointmentSnapshot(
        appointment_id=apt.appointment_id,
        worker_id=apt.worker_id,
        title=apt.title,
        start=to_local(apt.start_time, tz_name),
        end=to_local(apt.end_time, tz_name),
        status=apt.status,
    )


def load_appointments(
    db: Session,
    tz_name: str,
    worker_ids: Optional[list[UUID]] = None,
    company_id: Optional[UUID] = None,
) -> list[AppointmentSnapshot]:
    """Non-cancelled appointments as tenant-local snapshots."""
    stmt = select(Appointment).where(Appointment.status != AppointmentStatus.cancelled)
    if worker_ids is not None:
        stmt = stmt.where(Appointment.worker_id.in_(worker_ids))
    if company_id is not None:
        stmt = stmt.where(Appointment.company_id == company_id)
    rows = db.execute(stmt.order_by(Appointment.start_time.asc())).scalars().all()
    return [appointment_snapshot(a, tz_name) for a in rows]


def check_worker_availability(db: Session, worker: Worker, start: datetime, end: datetime) -> AvailabilityResult:
    require_interval(start, end)
    tz_name = company_timezone(db, worker.company_id)
    profile = load_worker_profile(db, worker)
    result = is_available(profile, to_local(start, tz_name), to_local(end, tz_name))
    if not result.available:
        logger.info(f"Worker {worker.worker_id} unavailable {start} - {end}: {result.reason}")
    return result
