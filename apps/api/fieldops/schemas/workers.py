from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal
from uuid import UUID

from fieldops.schemas.availability import (
    SeasonalWindow,
    UnavailabilityPeriod,
    WeeklyScheduleEntry,
)

EmploymentType = Literal["full_time", "part_time", "casual"]

class WorkerCreate(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    standard_work_hours: Optional[Decimal] = Field(default=None, ge=0, le=168)
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    is_active: bool = True

class WorkerOut(BaseModel):
    worker_id: UUID
    company_id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    employment_type: Optional[str] = None
    standard_work_hours: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    is_active: bool

class WorkerProfileOut(WorkerOut):
    schedule: list[WeeklyScheduleEntry] = []
    unavailability: list[UnavailabilityPeriod] = []
    seasonal_windows: list[SeasonalWindow] = []

class ScheduleReplace(BaseModel):
    entries: list[WeeklyScheduleEntry] = []

class UnavailabilityReplace(BaseModel):
    periods: list[UnavailabilityPeriod] = []
