import enum
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class AppointmentStatus(str, enum.Enum):
    draft = "draft"
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class AppointmentSnapshot(BaseModel):
    appointment_id: UUID
    worker_id: Optional[UUID] = None
    title: Optional[str] = None
    start: datetime
    end: datetime
    status: AppointmentStatus = AppointmentStatus.scheduled

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.cancelled

    @property
    def is_degenerate(self) -> bool:
        return self.start >= self.end


class ConflictResult(BaseModel):
    conflict: bool
    reason: Optional[str] = None
    conflicting_appointment_id: Optional[UUID] = None


class WorkerCapacityInput(BaseModel):
    worker_id: UUID
    name: str
    employment_type: Optional[str] = None
    standard_work_hours: Optional[float] = None


class WorkerCapacity(BaseModel):
    worker_id: UUID
    name: str
    standard_hours: float
    scheduled_hours: float
    available_hours: float


class AppointmentCreate(BaseModel):
    company_id: UUID
    worker_id: Optional[UUID] = None
    title: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = AppointmentStatus.scheduled
    location_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    location_lng: Optional[float] = Field(default=None, ge=-180, le=180)
    gps_check_in_radius: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AppointmentReschedule(BaseModel):
    worker_id: Optional[UUID] = None
    start_time: datetime
    end_time: datetime
    status: Optional[AppointmentStatus] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ConflictCheckRequest(BaseModel):
    worker_id: UUID
    start: datetime
    end: datetime
    exclude_appointment_id: Optional[UUID] = None


class NextSlotRequest(BaseModel):
    worker_id: UUID
    start: datetime
    duration_minutes: int = Field(default=240, gt=0)


class AppointmentOut(BaseModel):
    appointment_id: UUID
    company_id: UUID
    worker_id: Optional[UUID] = None
    title: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    availability_warning: Optional[str] = None
