from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.schemas.projects import GanttBarOut, GanttOut, TaskSnapshot


def chart_range(
    tasks: Iterable[TaskSnapshot],
    project_start: Optional[date] = None,
    project_end: Optional[date] = None,
) -> tuple[date, date]:
    """Project dates when set, widened so every task fits."""
    tasks = list(tasks)
    starts = [t.start_date for t in tasks]
    ends = [t.end_date for t in tasks]
    if project_start:
        starts.append(project_start)
    if project_end:
        ends.append(project_end)
    if not starts or not ends:
        raise SchedulingValidationError("cannot derive a chart range without tasks or project dates")
    return min(starts), max(max(ends), min(starts))


def project_gantt_layout(
    chart_start: date,
    chart_end: date,
    tasks: Iterable[TaskSnapshot],
    critical_task_ids: Optional[set[str]] = None,
) -> GanttOut:
    """
    Linear day -> percentage mapping for bar placement.

    left%  = days from chart_start to the task start / total chart days
    width% = task duration in days / total chart days
    """
    if chart_end < chart_start:
        raise SchedulingValidationError("chart_end must be >= chart_start")

    critical_task_ids = critical_task_ids or set()
    total_days = (chart_end - chart_start).days + 1

    bars = []
    for t in tasks:
        offset = (t.start_date - chart_start).days
        duration = t.duration_days
        bars.append(
            GanttBarOut(
                task_id=t.task_id,
                name=t.name,
                start_offset_days=offset,
                duration_days=duration,
                left_percent=offset / total_days * 100,
                width_percent=duration / total_days * 100,
                is_critical=t.task_id in critical_task_ids,
                status=t.status,
                progress=t.progress,
            )
        )

    return GanttOut(chart_start=chart_start, chart_end=chart_end, total_days=total_days, bars=bars)
