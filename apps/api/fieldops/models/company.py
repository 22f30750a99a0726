import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fieldops.core.database import Base

class Company(Base):
    __tablename__ = "companies"

    company_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)

    # Wall-clock for schedules, appointments and availability checks
    timezone = Column(String, nullable=False, default="Australia/Sydney")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
