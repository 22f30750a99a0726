import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TimeLogStatus(str, enum.Enum):
    in_progress = "in_progress"
    completed = "completed"
    approved = "approved"


class DistanceWarningLevel(str, enum.Enum):
    ok = "ok"
    warning = "warning"
    danger = "danger"


class GeoPoint(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class TimeLogSnapshot(BaseModel):
    time_log_id: UUID
    appointment_id: UUID
    worker_id: UUID
    worker_name: str = ""
    clock_in: datetime
    clock_out: Optional[datetime] = None
    hourly_rate: Decimal = Decimal("0")
    overhead_percentage: Decimal = Decimal("0")
    total_hours: Optional[Decimal] = None
    total_cost: Optional[Decimal] = None
    status: TimeLogStatus = TimeLogStatus.in_progress
    check_in: Optional[GeoPoint] = None
    check_out: Optional[GeoPoint] = None
    invoice_id: Optional[UUID] = None


class CheckInVerification(BaseModel):
    allowed: bool
    distance_meters: Optional[int] = None
    radius_meters: int
    level: Optional[DistanceWarningLevel] = None
    reason: Optional[str] = None


class TimeLogDistance(BaseModel):
    time_log_id: UUID
    worker_id: UUID
    check_in_distance_meters: Optional[float] = None
    check_in_level: Optional[DistanceWarningLevel] = None
    check_out_distance_meters: Optional[float] = None
    check_out_level: Optional[DistanceWarningLevel] = None


class TimeLogSummary(BaseModel):
    appointment_id: UUID
    total_hours: Decimal
    total_cost: Decimal
    worker_count: int
    distance_warnings: int
    location_available: bool
    logs: list[TimeLogDistance]


class CheckInRequest(BaseModel):
    worker_id: UUID
    position: GeoPoint
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    overhead_percentage: Optional[Decimal] = Field(default=None, ge=0)
    clock_in: Optional[datetime] = None


class CheckOutRequest(BaseModel):
    position: Optional[GeoPoint] = None
    clock_out: Optional[datetime] = None


class TimeLogCreate(BaseModel):
    """Supervisor-entered log."""

    appointment_id: UUID
    worker_id: UUID
    clock_in: datetime
    clock_out: Optional[datetime] = None
    hourly_rate: Decimal = Field(ge=0)
    overhead_percentage: Optional[Decimal] = Field(default=None, ge=0)
    status: TimeLogStatus = TimeLogStatus.completed
    notes: Optional[str] = "Manually created by supervisor"

    @model_validator(mode="after")
    def _check_range(self):
        if self.clock_out is not None and self.clock_out <= self.clock_in:
            raise ValueError("clock_out must be after clock_in")
        return self


class TimeLogOut(BaseModel):
    time_log_id: UUID
    appointment_id: UUID
    worker_id: UUID
    clock_in: datetime
    clock_out: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    total_cost: Optional[Decimal] = None
    status: TimeLogStatus
    verification: Optional[CheckInVerification] = None
