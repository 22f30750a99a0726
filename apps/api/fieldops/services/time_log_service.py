import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.models.appointment import Appointment
from fieldops.models.time_log import TimeLog
from fieldops.models.worker import Worker
from fieldops.scheduling.timekeeping import (
    compute_time_log_totals,
    distance_between,
    distance_warning_level,
    format_distance,
    summarize_time_logs,
    verify_check_in,
)
from fieldops.schemas.time_logs import (
    CheckInRequest,
    CheckInVerification,
    CheckOutRequest,
    DistanceWarningLevel,
    GeoPoint,
    TimeLogCreate,
    TimeLogOut,
    TimeLogSnapshot,
    TimeLogStatus,
    TimeLogSummary,
)
from fieldops.services.availability_service import company_timezone, require_worker, to_stored

logger = logging.getLogger(__name__)


def require_appointment(db: Session, appointment_id: UUID) -> Appointment:
    apt = db.get(Appointment, appointment_id)
    if not apt:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return apt


def appointment_site(apt: Appointment) -> Optional[GeoPoint]:
    if apt.location_lat is None or apt.location_lng is None:
        return None
    return GeoPoint(lat=apt.location_lat, lng=apt.location_lng)


def _point(lat: Optional[float], lng: Optional[float]) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


def time_log_snapshot(log: TimeLog, worker_name: str = "") -> TimeLogSnapshot:
    return TimeLogSnapshot(
        time_log_id=log.time_log_id,
        appointment_id=log.appointment_id,
        worker_id=log.worker_id,
        worker_name=worker_name,
        clock_in=log.clock_in,
        clock_out=log.clock_out,
        hourly_rate=log.hourly_rate,
        overhead_percentage=log.overhead_percentage,
        total_hours=log.total_hours,
        total_cost=log.total_cost,
        status=log.status,
        check_in=_point(log.latitude, log.longitude),
        check_out=_point(log.check_out_lat, log.check_out_lng),
        invoice_id=log.invoice_id,
    )


def time_log_out(log: TimeLog, tz_name: str, verification: Optional[CheckInVerification] = None) -> TimeLogOut:
    return TimeLogOut(
        time_log_id=log.time_log_id,
        appointment_id=log.appointment_id,
        worker_id=log.worker_id,
        clock_in=to_stored(log.clock_in, tz_name),
        clock_out=to_stored(log.clock_out, tz_name) if log.clock_out else None,
        total_hours=log.total_hours,
        total_cost=log.total_cost,
        status=log.status,
        verification=verification,
    )


def _apply_totals(log: TimeLog, tz_name: str) -> None:
    clock_out = to_stored(log.clock_out, tz_name) if log.clock_out else None
    log.total_hours, log.total_cost = compute_time_log_totals(
        to_stored(log.clock_in, tz_name), clock_out, log.hourly_rate, log.overhead_percentage
    )


def _default_rate(worker: Worker, requested: Optional[Decimal]) -> Decimal:
    if requested is not None:
        return requested
    return worker.hourly_rate if worker.hourly_rate is not None else Decimal("0")


def check_in(db: Session, appointment_id: UUID, payload: CheckInRequest) -> TimeLogOut:
    apt = require_appointment(db, appointment_id)
    worker = require_worker(db, payload.worker_id)
    tz_name = company_timezone(db, apt.company_id)

    verification = verify_check_in(
        appointment_site(apt),
        payload.position,
        apt.gps_check_in_radius or settings.default_gps_check_in_radius,
        settings.distance_warning_meters,
        settings.distance_danger_meters,
    )
    if verification.level == DistanceWarningLevel.danger:
        logger.warning(
            f"Worker {worker.worker_id} checking in {format_distance(verification.distance_meters)} "
            f"from appointment {apt.appointment_id}"
        )
    if not verification.allowed:
        raise HTTPException(status_code=403, detail=verification.reason)

    open_log = db.execute(
        select(TimeLog).where(
            TimeLog.appointment_id == apt.appointment_id,
            TimeLog.worker_id == worker.worker_id,
            TimeLog.clock_out.is_(None),
        )
    ).scalars().first()
    if open_log is not None:
        raise HTTPException(status_code=409, detail="Worker is already checked in to this appointment")

    log = TimeLog(
        appointment_id=apt.appointment_id,
        worker_id=worker.worker_id,
        clock_in=to_stored(payload.clock_in or datetime.now(timezone.utc), tz_name),
        latitude=payload.position.lat,
        longitude=payload.position.lng,
        hourly_rate=_default_rate(worker, payload.hourly_rate),
        overhead_percentage=(
            payload.overhead_percentage
            if payload.overhead_percentage is not None
            else settings.default_overhead_percentage
        ),
        status=TimeLogStatus.in_progress,
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.info(f"Worker {worker.worker_id} checked in to appointment {apt.appointment_id}")
    return time_log_out(log, tz_name, verification)


def check_out(db: Session, time_log_id: UUID, payload: CheckOutRequest) -> TimeLogOut:
    log = db.get(TimeLog, time_log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Time log not found")
    if log.clock_out is not None:
        raise HTTPException(status_code=409, detail="Time log is already checked out")

    apt = require_appointment(db, log.appointment_id)
    tz_name = company_timezone(db, apt.company_id)

    log.clock_out = to_stored(payload.clock_out or datetime.now(timezone.utc), tz_name)
    if payload.position is not None:
        log.check_out_lat = payload.position.lat
        log.check_out_lng = payload.position.lng

        site = appointment_site(apt)
        if site is not None:
            meters = distance_between(site, payload.position)
            if distance_warning_level(meters, settings.distance_warning_meters, settings.distance_danger_meters) == DistanceWarningLevel.danger:
                logger.warning(f"Time log {log.time_log_id} checked out {format_distance(meters)} from site")

    _apply_totals(log, tz_name)
    log.status = TimeLogStatus.completed
    db.commit()
    db.refresh(log)

    logger.info(f"Time log {log.time_log_id} closed: {log.total_hours} h, cost {log.total_cost}")
    return time_log_out(log, tz_name)


def create_time_log(db: Session, payload: TimeLogCreate) -> TimeLogOut:
    apt = require_appointment(db, payload.appointment_id)
    worker = require_worker(db, payload.worker_id)
    tz_name = company_timezone(db, apt.company_id)

    log = TimeLog(
        appointment_id=apt.appointment_id,
        worker_id=worker.worker_id,
        clock_in=to_stored(payload.clock_in, tz_name),
        clock_out=to_stored(payload.clock_out, tz_name) if payload.clock_out else None,
        hourly_rate=payload.hourly_rate,
        overhead_percentage=(
            payload.overhead_percentage
            if payload.overhead_percentage is not None
            else settings.default_overhead_percentage
        ),
        status=payload.status if payload.clock_out else TimeLogStatus.in_progress,
        notes=payload.notes,
    )
    _apply_totals(log, tz_name)
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.info(f"Manual time log {log.time_log_id} created for worker {worker.worker_id}")
    return time_log_out(log, tz_name)


def load_time_log_snapshots(db: Session, appointment_id: UUID) -> list[TimeLogSnapshot]:
    rows = db.execute(
        select(TimeLog, Worker.name)
        .join(Worker, Worker.worker_id == TimeLog.worker_id)
        .where(TimeLog.appointment_id == appointment_id)
        .order_by(TimeLog.clock_in.asc())
    ).all()
    return [time_log_snapshot(log, name) for log, name in rows]


def appointment_time_summary(db: Session, appointment_id: UUID) -> TimeLogSummary:
    apt = require_appointment(db, appointment_id)
    return summarize_time_logs(
        apt.appointment_id,
        load_time_log_snapshots(db, apt.appointment_id),
        appointment_site(apt),
        settings.distance_warning_meters,
        settings.distance_danger_meters,
    )
