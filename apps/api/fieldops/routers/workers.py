import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.models.seasonal_availability import (
    WorkerSeasonalAvailability,
    WorkerSeasonalAvailabilityDate,
)
from fieldops.models.worker_schedule import WorkerSchedule
from fieldops.models.worker_unavailability import WorkerUnavailability
from fieldops.routers.companies import worker_out
from fieldops.schemas.availability import SeasonalDateOverride, SeasonalWindow, SeasonalWindowCreate
from fieldops.schemas.workers import ScheduleReplace, UnavailabilityReplace, WorkerProfileOut
from fieldops.services.availability_service import load_seasonal_windows, load_worker_profile, require_worker
from fieldops.services.validators import find_overlapping_window, validate_schedule_entries

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile_out(db: Session, worker) -> WorkerProfileOut:
    profile = load_worker_profile(db, worker)
    return WorkerProfileOut(
        **worker_out(worker).model_dump(),
        schedule=profile.schedule,
        unavailability=profile.unavailability,
        seasonal_windows=profile.seasonal_windows,
    )


def _require_window(db: Session, worker_id: UUID, seasonal_id: UUID) -> WorkerSeasonalAvailability:
    window = db.get(WorkerSeasonalAvailability, seasonal_id)
    if not window or window.worker_id != worker_id:
        raise HTTPException(status_code=404, detail="Seasonal availability not found")
    return window


@router.get("/{worker_id}", response_model=WorkerProfileOut)
def get_worker(worker_id: UUID, db: Session = Depends(get_db)):
    return _profile_out(db, require_worker(db, worker_id))


@router.put("/{worker_id}/schedule", response_model=WorkerProfileOut)
def replace_schedule(worker_id: UUID, payload: ScheduleReplace, db: Session = Depends(get_db)):
    worker = require_worker(db, worker_id)
    validate_schedule_entries(payload.entries)

    # One transaction: replace the whole week
    db.execute(delete(WorkerSchedule).where(WorkerSchedule.worker_id == worker_id))
    for e in payload.entries:
        db.add(
            WorkerSchedule(
                worker_id=worker_id,
                day_of_week=e.day_of_week,
                start_time=e.start_time,
                end_time=e.end_time,
                is_active=e.is_active,
            )
        )
    db.commit()

    logger.info(f"Replaced schedule for worker {worker_id} ({len(payload.entries)} entries)")
    return _profile_out(db, worker)


@router.put("/{worker_id}/unavailability", response_model=WorkerProfileOut)
def replace_unavailability(worker_id: UUID, payload: UnavailabilityReplace, db: Session = Depends(get_db)):
    worker = require_worker(db, worker_id)

    db.execute(delete(WorkerUnavailability).where(WorkerUnavailability.worker_id == worker_id))
    for p in payload.periods:
        db.add(
            WorkerUnavailability(
                worker_id=worker_id,
                start_date=p.start_date,
                end_date=p.end_date,
                start_time=p.start_time,
                end_time=p.end_time,
                reason=p.reason,
                notes=p.notes,
            )
        )
    db.commit()

    logger.info(f"Replaced unavailability for worker {worker_id} ({len(payload.periods)} periods)")
    return _profile_out(db, worker)


@router.get("/{worker_id}/seasonal", response_model=list[SeasonalWindow])
def list_seasonal_windows(worker_id: UUID, db: Session = Depends(get_db)):
    require_worker(db, worker_id)
    return sorted(load_seasonal_windows(db, worker_id), key=lambda w: w.start_date)


@router.post("/{worker_id}/seasonal", response_model=SeasonalWindow, status_code=201)
def create_seasonal_window(worker_id: UUID, payload: SeasonalWindowCreate, db: Session = Depends(get_db)):
    require_worker(db, worker_id)

    existing = db.execute(
        select(WorkerSeasonalAvailability).where(WorkerSeasonalAvailability.worker_id == worker_id)
    ).scalars().all()
    clash = find_overlapping_window(existing, payload.start_date, payload.end_date)
    if clash is not None:
        raise HTTPException(
            status_code=409,
            detail=f"Overlaps seasonal availability '{clash.name}' ({clash.start_date} to {clash.end_date})",
        )

    window = WorkerSeasonalAvailability(
        worker_id=worker_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    db.add(window)
    db.flush()

    for d in payload.dates:
        db.add(
            WorkerSeasonalAvailabilityDate(
                seasonal_availability_id=window.seasonal_availability_id,
                date=d.date,
                periods=[p.value for p in d.periods],
            )
        )
    db.commit()
    db.refresh(window)

    logger.info(f"Created seasonal availability '{window.name}' for worker {worker_id}")
    return SeasonalWindow(
        seasonal_id=window.seasonal_availability_id,
        name=window.name,
        start_date=window.start_date,
        end_date=window.end_date,
        created_at=window.created_at,
        dates=payload.dates,
    )


@router.put("/{worker_id}/seasonal/{seasonal_id}/dates", response_model=SeasonalWindow)
def replace_seasonal_dates(
    worker_id: UUID,
    seasonal_id: UUID,
    payload: list[SeasonalDateOverride],
    db: Session = Depends(get_db),
):
    window = _require_window(db, worker_id, seasonal_id)

    seen = set()
    for d in payload:
        if not (window.start_date <= d.date <= window.end_date):
            raise HTTPException(status_code=422, detail=f"Date {d.date} is outside the seasonal window")
        if d.date in seen:
            raise HTTPException(status_code=422, detail=f"Date {d.date} listed more than once")
        seen.add(d.date)

    db.execute(
        delete(WorkerSeasonalAvailabilityDate).where(
            WorkerSeasonalAvailabilityDate.seasonal_availability_id == seasonal_id
        )
    )
    for d in payload:
        db.add(
            WorkerSeasonalAvailabilityDate(
                seasonal_availability_id=seasonal_id,
                date=d.date,
                periods=[p.value for p in d.periods],
            )
        )
    db.commit()

    return SeasonalWindow(
        seasonal_id=window.seasonal_availability_id,
        name=window.name,
        start_date=window.start_date,
        end_date=window.end_date,
        created_at=window.created_at,
        dates=sorted(payload, key=lambda d: d.date),
    )


@router.delete("/{worker_id}/seasonal/{seasonal_id}", status_code=204)
def delete_seasonal_window(worker_id: UUID, seasonal_id: UUID, db: Session = Depends(get_db)):
    window = _require_window(db, worker_id, seasonal_id)
    db.execute(
        delete(WorkerSeasonalAvailabilityDate).where(
            WorkerSeasonalAvailabilityDate.seasonal_availability_id == seasonal_id
        )
    )
    db.delete(window)
    db.commit()
