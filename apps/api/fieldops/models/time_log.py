import uuid
from sqlalchemy import Column, DateTime, Float, Numeric, Text, Enum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fieldops.core.database import Base
from fieldops.schemas.time_logs import TimeLogStatus

class TimeLog(Base):
    __tablename__ = "time_logs"

    time_log_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    appointment_id = Column(
        UUID(as_uuid=True),
        ForeignKey("appointments.appointment_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    worker_id = Column(
        UUID(as_uuid=True),
        ForeignKey("workers.worker_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    clock_in = Column(DateTime(timezone=True), nullable=False)
    clock_out = Column(DateTime(timezone=True), nullable=True)

    # Check-in position
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    check_out_lat = Column(Float, nullable=True)
    check_out_lng = Column(Float, nullable=True)

    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    overhead_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    total_hours = Column(Numeric(8, 2), nullable=True)
    total_cost = Column(Numeric(12, 2), nullable=True)

    status = Column(Enum(TimeLogStatus, name="time_log_status"), nullable=False, default=TimeLogStatus.in_progress)
    notes = Column(Text, nullable=True)

    invoice_id = Column(
        UUID(as_uuid=True),
        ForeignKey("invoices.invoice_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
