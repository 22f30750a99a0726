from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class InvoiceLineDraft(BaseModel):
    description: str
    worker_id: Optional[UUID] = None
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    is_gst_free: bool = False
    time_log_ids: list[UUID] = Field(default_factory=list)


class InvoiceDraft(BaseModel):
    appointment_id: Optional[UUID] = None
    lines: list[InvoiceLineDraft]
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal


class InvoiceGenerateRequest(BaseModel):
    # Charge-out rate per worker; falls back to the time log's hourly_rate
    rate_overrides: dict[UUID, Decimal] = Field(default_factory=dict)
    gst_free: bool = False


class InvoiceOut(InvoiceDraft):
    invoice_id: UUID
    invoice_number: str
    status: str
    created_at: Optional[datetime] = None
