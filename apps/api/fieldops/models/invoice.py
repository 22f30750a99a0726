import uuid
from sqlalchemy import Column, String, DateTime, Numeric, Boolean, Text, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fieldops.core.database import Base

class Invoice(Base):
    __tablename__ = "invoices"

    invoice_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    company_id = Column(
        UUID(as_uuid=True),
        ForeignKey("companies.company_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    appointment_id = Column(
        UUID(as_uuid=True),
        ForeignKey("appointments.appointment_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    invoice_number = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")

    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_total = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("company_id", "invoice_number", name="uq_invoices_company_number"),
    )


class InvoiceLineItem(Base):
    __tablename__ = "invoice_line_items"

    line_item_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    invoice_id = Column(
        UUID(as_uuid=True),
        ForeignKey("invoices.invoice_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    worker_id = Column(
        UUID(as_uuid=True),
        ForeignKey("workers.worker_id", ondelete="SET NULL"),
        nullable=True,
    )

    description = Column(Text, nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    line_total = Column(Numeric(12, 2), nullable=False)
    is_gst_free = Column(Boolean, nullable=False, default=False)

    time_log_ids = Column(JSON, nullable=False, default=list)
