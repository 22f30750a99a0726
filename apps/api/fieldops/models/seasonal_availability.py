import uuid
from sqlalchemy import Column, Date, DateTime, String, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fieldops.core.database import Base

class WorkerSeasonalAvailability(Base):
    __tablename__ = "worker_seasonal_availability"

    seasonal_availability_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    worker_id = Column(
        UUID(as_uuid=True),
        ForeignKey("workers.worker_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class WorkerSeasonalAvailabilityDate(Base):
    __tablename__ = "worker_seasonal_availability_dates"

    seasonal_date_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    seasonal_availability_id = Column(
        UUID(as_uuid=True),
        ForeignKey("worker_seasonal_availability.seasonal_availability_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date = Column(Date, nullable=False)
    periods = Column(JSON, nullable=False, default=list)  # ["morning", "afternoon", "evening", "anytime"]

    __table_args__ = (
        UniqueConstraint("seasonal_availability_id", "date", name="uq_seasonal_dates_window_date"),
    )
