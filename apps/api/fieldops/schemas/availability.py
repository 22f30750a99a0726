from datetime import date, datetime, time
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from fieldops.scheduling.periods import Period


class WeeklyScheduleEntry(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0=Sun ... 6=Sat
    start_time: time
    end_time: time
    is_active: bool = True

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class UnavailabilityPeriod(BaseModel):
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    reason: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be set together")
        if self.start_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def is_timed(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    def covers(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date


class SeasonalDateOverride(BaseModel):
    date: date
    periods: list[Period] = Field(default_factory=list)


class SeasonalWindowCreate(BaseModel):
    name: str = Field(min_length=1)
    start_date: date
    end_date: date
    dates: list[SeasonalDateOverride] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        for d in self.dates:
            if not (self.start_date <= d.date <= self.end_date):
                raise ValueError(f"override date {d.date} is outside the seasonal window")
        return self


class SeasonalWindow(SeasonalWindowCreate):
    seasonal_id: UUID
    created_at: Optional[datetime] = None

    def covers(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date

    def override_for(self, d: date) -> Optional[SeasonalDateOverride]:
        for o in self.dates:
            if o.date == d:
                return o
        return None


class WorkerAvailabilityProfile(BaseModel):
    """Everything the resolver needs about one worker, validated once at load time."""

    worker_id: UUID
    name: str = ""
    schedule: list[WeeklyScheduleEntry] = Field(default_factory=list)
    unavailability: list[UnavailabilityPeriod] = Field(default_factory=list)
    seasonal_windows: list[SeasonalWindow] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_active_entry_per_day(self):
        seen: set[int] = set()
        for entry in self.schedule:
            if not entry.is_active:
                continue
            if entry.day_of_week in seen:
                raise ValueError(f"more than one active schedule entry for day_of_week={entry.day_of_week}")
            seen.add(entry.day_of_week)
        return self

    def schedule_for(self, dow: int) -> Optional[WeeklyScheduleEntry]:
        for entry in self.schedule:
            if entry.is_active and entry.day_of_week == dow:
                return entry
        return None


AvailabilitySource = Literal["seasonal", "schedule", "unavailability", "default"]


class AvailabilityResult(BaseModel):
    available: bool
    reason: Optional[str] = None
    available_periods: Optional[list[Period]] = None
    source: AvailabilitySource = "default"


class AvailabilityCheckRequest(BaseModel):
    worker_id: UUID
    start: datetime
    end: datetime


class DayAvailability(BaseModel):
    date: date
    day_of_week: int
    is_available: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_unavailable: bool = False
    unavailability_reason: Optional[str] = None
    available_hours: float = 0
    assigned_hours: float = 0
    seasonal_periods: list[Period] = Field(default_factory=list)
    is_seasonal_override: bool = False


class WorkerMonthAvailability(BaseModel):
    worker_id: UUID
    name: str
    days: list[DayAvailability]


WeeklyStatus = Literal["available", "partial", "unavailable"]


class WorkerWeekStatus(BaseModel):
    worker_id: UUID
    name: str
    status: WeeklyStatus
    reason: Optional[str] = None
