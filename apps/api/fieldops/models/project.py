import uuid
from sqlalchemy import Column, String, Date, DateTime, Integer, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fieldops.core.database import Base
from fieldops.schemas.projects import DependencyType

class Project(Base):
    __tablename__ = "projects"

    project_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.company_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ProjectTask(Base):
    __tablename__ = "project_tasks"

    task_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    project_id = Column(
        UUID(as_uuid=True),
        ForeignKey("projects.project_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="not_started")
    progress_percentage = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TaskDependency(Base):
    __tablename__ = "project_task_dependencies"

    dependency_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    task_id = Column(
        UUID(as_uuid=True),
        ForeignKey("project_tasks.task_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    depends_on_task_id = Column(
        UUID(as_uuid=True),
        ForeignKey("project_tasks.task_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    dependency_type = Column(
        Enum(DependencyType, name="dependency_type"),
        nullable=False,
        default=DependencyType.finish_to_start,
    )
    lag_days = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("task_id", "depends_on_task_id", name="uq_task_dependency_pair"),
    )
