import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.models.project import Project, ProjectTask, TaskDependency
from fieldops.scheduling.critical_path import compute_critical_path
from fieldops.schemas.projects import (
    CriticalPathOut,
    DependencySnapshot,
    GanttOut,
    ProjectCreate,
    ProjectTaskCreate,
    TaskDependencyCreate,
)
from fieldops.services.availability_service import require_company
from fieldops.services.project_service import (
    load_project_graph,
    project_critical_path,
    project_gantt,
    require_project,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db)):
    require_company(db, payload.company_id)
    if payload.start_date and payload.end_date and payload.end_date < payload.start_date:
        raise HTTPException(status_code=422, detail="end_date must be >= start_date")

    project = Project(
        company_id=payload.company_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return {"project_id": str(project.project_id), "name": project.name}


@router.post("/{project_id}/tasks", status_code=201)
def create_task(project_id: UUID, payload: ProjectTaskCreate, db: Session = Depends(get_db)):
    require_project(db, project_id)
    task = ProjectTask(
        project_id=project_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=payload.status,
        progress_percentage=payload.progress,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return {"task_id": str(task.task_id), "name": task.name}


@router.post("/{project_id}/dependencies", status_code=201)
def create_dependency(project_id: UUID, payload: TaskDependencyCreate, db: Session = Depends(get_db)):
    require_project(db, project_id)
    if payload.task_id == payload.depends_on_task_id:
        raise HTTPException(status_code=422, detail="A task cannot depend on itself")

    for tid in (payload.task_id, payload.depends_on_task_id):
        task = db.get(ProjectTask, tid)
        if not task or task.project_id != project_id:
            raise HTTPException(status_code=404, detail=f"Task {tid} not found in project")

    existing = db.execute(
        select(TaskDependency).where(
            TaskDependency.task_id == payload.task_id,
            TaskDependency.depends_on_task_id == payload.depends_on_task_id,
        )
    ).scalars().first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Dependency already exists")

    # Refuse edges that would close a cycle
    tasks, deps = load_project_graph(db, project_id)
    deps.append(
        DependencySnapshot(
            task_id=str(payload.task_id),
            depends_on_task_id=str(payload.depends_on_task_id),
            dependency_type=payload.dependency_type,
            lag_days=payload.lag_days,
        )
    )
    compute_critical_path(tasks, deps)

    dep = TaskDependency(
        task_id=payload.task_id,
        depends_on_task_id=payload.depends_on_task_id,
        dependency_type=payload.dependency_type,
        lag_days=payload.lag_days,
    )
    db.add(dep)
    db.commit()
    db.refresh(dep)

    logger.info(f"Task {payload.task_id} now depends on {payload.depends_on_task_id} ({payload.dependency_type.value})")
    return {"dependency_id": str(dep.dependency_id)}


@router.get("/{project_id}/critical-path", response_model=CriticalPathOut)
def critical_path(project_id: UUID, db: Session = Depends(get_db)):
    return project_critical_path(db, project_id)


@router.get("/{project_id}/gantt", response_model=GanttOut)
def gantt(project_id: UUID, critical: bool = True, db: Session = Depends(get_db)):
    return project_gantt(db, project_id, include_critical_path=critical)
