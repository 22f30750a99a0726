from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.models.company import Company
from fieldops.models.worker import Worker
from fieldops.schemas.company import CompanyCreate, CompanyOut
from fieldops.schemas.workers import WorkerCreate, WorkerOut
from fieldops.services.availability_service import require_company

router = APIRouter()


def worker_out(w: Worker) -> WorkerOut:
    return WorkerOut(
        worker_id=w.worker_id,
        company_id=w.company_id,
        name=w.name,
        email=w.email,
        phone=w.phone,
        employment_type=w.employment_type,
        standard_work_hours=w.standard_work_hours,
        hourly_rate=w.hourly_rate,
        is_active=w.is_active,
    )


@router.post("", response_model=CompanyOut, status_code=201)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db)):
    company = Company(name=payload.name, timezone=payload.timezone)
    db.add(company)
    db.commit()
    db.refresh(company)
    return CompanyOut(company_id=company.company_id, name=company.name, timezone=company.timezone)


@router.get("", response_model=list[CompanyOut])
def list_companies(db: Session = Depends(get_db)):
    companies = db.execute(select(Company).order_by(Company.name.asc())).scalars().all()
    return [CompanyOut(company_id=c.company_id, name=c.name, timezone=c.timezone) for c in companies]


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: UUID, db: Session = Depends(get_db)):
    c = require_company(db, company_id)
    return CompanyOut(company_id=c.company_id, name=c.name, timezone=c.timezone)


@router.post("/{company_id}/workers", response_model=WorkerOut, status_code=201)
def create_worker(company_id: UUID, payload: WorkerCreate, db: Session = Depends(get_db)):
    require_company(db, company_id)

    w = Worker(
        company_id=company_id,
        name=payload.name,
        email=str(payload.email) if payload.email else None,
        phone=payload.phone,
        employment_type=payload.employment_type,
        standard_work_hours=payload.standard_work_hours,
        hourly_rate=payload.hourly_rate,
        is_active=payload.is_active,
    )
    db.add(w)
    db.commit()
    db.refresh(w)
    return worker_out(w)


@router.get("/{company_id}/workers", response_model=list[WorkerOut])
def list_company_workers(company_id: UUID, db: Session = Depends(get_db)):
    require_company(db, company_id)
    rows = db.execute(
        select(Worker).where(Worker.company_id == company_id).order_by(Worker.name.asc())
    ).scalars().all()
    return [worker_out(w) for w in rows]
