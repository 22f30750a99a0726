import logging
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.models.project import Project, ProjectTask, TaskDependency
from fieldops.scheduling.critical_path import compute_critical_path
from fieldops.scheduling.gantt import chart_range, project_gantt_layout
from fieldops.schemas.projects import CriticalPathOut, DependencySnapshot, GanttOut, TaskSnapshot

logger = logging.getLogger(__name__)


def require_project(db: Session, project_id: UUID) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def load_project_graph(db: Session, project_id: UUID) -> tuple[list[TaskSnapshot], list[DependencySnapshot]]:
    tasks = db.execute(
        select(ProjectTask)
        .where(ProjectTask.project_id == project_id)
        .order_by(ProjectTask.start_date.asc(), ProjectTask.created_at.asc())
    ).scalars().all()

    task_ids = [t.task_id for t in tasks]
    deps = []
    if task_ids:
        deps = db.execute(
            select(TaskDependency).where(TaskDependency.task_id.in_(task_ids))
        ).scalars().all()

    return (
        [
            TaskSnapshot(
                task_id=str(t.task_id),
                name=t.name,
                start_date=t.start_date,
                end_date=t.end_date,
                status=t.status,
                progress=t.progress_percentage,
            )
            for t in tasks
        ],
        [
            DependencySnapshot(
                dependency_id=str(d.dependency_id),
                task_id=str(d.task_id),
                depends_on_task_id=str(d.depends_on_task_id),
                dependency_type=d.dependency_type,
                lag_days=d.lag_days,
            )
            for d in deps
        ],
    )


def project_critical_path(db: Session, project_id: UUID) -> CriticalPathOut:
    require_project(db, project_id)
    tasks, deps = load_project_graph(db, project_id)
    result = compute_critical_path(tasks, deps)
    logger.info(
        f"Critical path for project {project_id}: "
        f"{len(result.critical_task_ids)} critical of {len(tasks)}, {result.project_duration} days"
    )
    return result.to_out()


def project_gantt(db: Session, project_id: UUID, include_critical_path: bool = True) -> GanttOut:
    project = require_project(db, project_id)
    tasks, deps = load_project_graph(db, project_id)
    start, end = chart_range(tasks, project.start_date, project.end_date)

    critical = set()
    if include_critical_path and tasks:
        critical = compute_critical_path(tasks, deps).critical_task_ids
    return project_gantt_layout(start, end, tasks, critical)
