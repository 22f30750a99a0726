from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.schemas.appointments import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentReschedule,
    ConflictCheckRequest,
    ConflictResult,
    NextSlotRequest,
    WorkerCapacity,
)
from fieldops.services.appointment_service import (
    check_conflict,
    company_capacity,
    create_appointment,
    next_available_slot,
    reschedule_appointment,
)
from fieldops.services.availability_service import company_timezone, require_worker

router = APIRouter()


class NextSlotOut(BaseModel):
    found: bool
    start: Optional[str] = None
    end: Optional[str] = None


@router.post("", response_model=AppointmentOut, status_code=201)
def create(payload: AppointmentCreate, db: Session = Depends(get_db)):
    return create_appointment(db, payload)


@router.put("/{appointment_id}", response_model=AppointmentOut)
def reschedule(appointment_id: UUID, payload: AppointmentReschedule, db: Session = Depends(get_db)):
    return reschedule_appointment(db, appointment_id, payload)


@router.post("/conflicts", response_model=ConflictResult)
def conflicts(payload: ConflictCheckRequest, db: Session = Depends(get_db)):
    worker = require_worker(db, payload.worker_id)
    return check_conflict(
        db,
        worker.worker_id,
        payload.start,
        payload.end,
        company_timezone(db, worker.company_id),
        exclude_appointment_id=payload.exclude_appointment_id,
    )


@router.post("/next-slot", response_model=NextSlotOut)
def next_slot(payload: NextSlotRequest, db: Session = Depends(get_db)):
    worker = require_worker(db, payload.worker_id)
    slot = next_available_slot(db, worker, payload.start, timedelta(minutes=payload.duration_minutes))
    if slot is None:
        return NextSlotOut(found=False)
    return NextSlotOut(found=True, start=slot[0].isoformat(), end=slot[1].isoformat())


@router.get("/capacity", response_model=list[WorkerCapacity])
def capacity(company_id: UUID, week_start: date, db: Session = Depends(get_db)):
    return company_capacity(db, company_id, week_start)
