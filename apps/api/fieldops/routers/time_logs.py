from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.core.rate_limit import InMemoryRateLimiter, enforce, get_check_in_limiter
from fieldops.schemas.time_logs import CheckInRequest, CheckOutRequest, TimeLogCreate, TimeLogOut, TimeLogSummary
from fieldops.services.time_log_service import appointment_time_summary, check_in, check_out, create_time_log

router = APIRouter()


@router.post("/appointments/{appointment_id}/check-in", response_model=TimeLogOut, status_code=201)
def gps_check_in(
    appointment_id: UUID,
    payload: CheckInRequest,
    db: Session = Depends(get_db),
    limiter: InMemoryRateLimiter = Depends(get_check_in_limiter),
):
    enforce(limiter, f"check-in:{payload.worker_id}")
    return check_in(db, appointment_id, payload)


@router.post("/{time_log_id}/check-out", response_model=TimeLogOut)
def gps_check_out(time_log_id: UUID, payload: CheckOutRequest, db: Session = Depends(get_db)):
    return check_out(db, time_log_id, payload)


@router.post("", response_model=TimeLogOut, status_code=201)
def create_manual(payload: TimeLogCreate, db: Session = Depends(get_db)):
    return create_time_log(db, payload)


@router.get("/appointments/{appointment_id}", response_model=TimeLogSummary)
def appointment_summary(appointment_id: UUID, db: Session = Depends(get_db)):
    return appointment_time_summary(db, appointment_id)
