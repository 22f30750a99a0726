import enum
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class DependencyType(str, enum.Enum):
    finish_to_start = "finish_to_start"
    start_to_start = "start_to_start"
    finish_to_finish = "finish_to_finish"
    start_to_finish = "start_to_finish"


class TaskSnapshot(BaseModel):
    task_id: str
    name: str = ""
    start_date: date
    end_date: date
    status: str = "not_started"
    progress: int = Field(default=0, ge=0, le=100)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError(f"task {self.task_id}: end_date must be >= start_date")
        return self

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class DependencySnapshot(BaseModel):
    dependency_id: Optional[str] = None
    task_id: str  # successor
    depends_on_task_id: str  # predecessor
    dependency_type: DependencyType = DependencyType.finish_to_start
    lag_days: int = 0


class TaskTiming(BaseModel):
    earliest_start: int
    earliest_finish: int
    latest_start: int
    latest_finish: int
    slack: int


class CriticalPathOut(BaseModel):
    project_start: Optional[date] = None
    project_duration: int
    critical_task_ids: list[str]
    slack_by_task: dict[str, int]
    timings: dict[str, TaskTiming]


class GanttBarOut(BaseModel):
    task_id: str
    name: str
    start_offset_days: int
    duration_days: int
    left_percent: float
    width_percent: float
    is_critical: bool = False
    status: str = "not_started"
    progress: int = 0


class GanttOut(BaseModel):
    chart_start: date
    chart_end: date
    total_days: int
    bars: list[GanttBarOut]


class ProjectCreate(BaseModel):
    company_id: UUID
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProjectTaskCreate(BaseModel):
    name: str
    start_date: date
    end_date: date
    status: str = "not_started"
    progress: int = Field(default=0, ge=0, le=100)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        return self


class TaskDependencyCreate(BaseModel):
    task_id: UUID
    depends_on_task_id: UUID
    dependency_type: DependencyType = DependencyType.finish_to_start
    lag_days: int = 0
