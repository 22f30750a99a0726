import uuid
from sqlalchemy import Column, Time, SmallInteger, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from fieldops.core.database import Base

class WorkerSchedule(Base):
    __tablename__ = "worker_schedule"

    schedule_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    worker_id = Column(
        UUID(as_uuid=True),
        ForeignKey("workers.worker_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    day_of_week = Column(SmallInteger, nullable=False)  # 0=Sun ... 6=Sat
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    is_active = Column(Boolean, nullable=False, default=True)
