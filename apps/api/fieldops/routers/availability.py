from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.scheduling.board import rank_workers_for_week, summarize_month
from fieldops.schemas.availability import (
    AvailabilityCheckRequest,
    AvailabilityResult,
    WorkerMonthAvailability,
    WorkerWeekStatus,
)
from fieldops.services.availability_service import (
    check_worker_availability,
    company_timezone,
    load_appointments,
    load_company_profiles,
    load_worker_profile,
    require_company,
    require_worker,
)

router = APIRouter()


@router.post("/check", response_model=AvailabilityResult)
def check_availability(payload: AvailabilityCheckRequest, db: Session = Depends(get_db)):
    worker = require_worker(db, payload.worker_id)
    return check_worker_availability(db, worker, payload.start, payload.end)


@router.get("/month", response_model=WorkerMonthAvailability)
def month_availability(
    worker_id: UUID,
    month: date = Query(..., description="Any date inside the month"),
    db: Session = Depends(get_db),
):
    worker = require_worker(db, worker_id)
    tz_name = company_timezone(db, worker.company_id)
    profile = load_worker_profile(db, worker)
    appointments = load_appointments(db, tz_name, worker_ids=[worker.worker_id])
    return summarize_month(profile, month, appointments)


@router.get("/week", response_model=list[WorkerWeekStatus])
def week_overview(company_id: UUID, week_start: date, db: Session = Depends(get_db)):
    require_company(db, company_id)
    return rank_workers_for_week(load_company_profiles(db, company_id), week_start)
