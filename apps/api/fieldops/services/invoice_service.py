import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fieldops.core.config import settings
from fieldops.models.invoice import Invoice, InvoiceLineItem
from fieldops.models.time_log import TimeLog
from fieldops.scheduling.invoicing import build_invoice_draft
from fieldops.schemas.invoices import InvoiceGenerateRequest, InvoiceLineDraft, InvoiceOut
from fieldops.services.time_log_service import load_time_log_snapshots, require_appointment

logger = logging.getLogger(__name__)


def next_invoice_number(db: Session, company_id: UUID) -> str:
    count = db.execute(
        select(func.count()).select_from(Invoice).where(Invoice.company_id == company_id)
    ).scalar_one()
    return f"INV-{count + 1:05d}"


def generate_invoice(db: Session, appointment_id: UUID, payload: InvoiceGenerateRequest) -> InvoiceOut:
    apt = require_appointment(db, appointment_id)
    draft = build_invoice_draft(
        load_time_log_snapshots(db, apt.appointment_id),
        gst_rate=settings.gst_rate,
        rate_overrides=payload.rate_overrides,
        gst_free=payload.gst_free,
        appointment_id=apt.appointment_id,
    )

    invoice = Invoice(
        company_id=apt.company_id,
        appointment_id=apt.appointment_id,
        invoice_number=next_invoice_number(db, apt.company_id),
        status="draft",
        subtotal=draft.subtotal,
        tax_total=draft.tax_total,
        total=draft.total,
    )
    db.add(invoice)
    db.flush()

    invoiced_ids = []
    for line in draft.lines:
        db.add(
            InvoiceLineItem(
                invoice_id=invoice.invoice_id,
                worker_id=line.worker_id,
                description=line.description,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                is_gst_free=line.is_gst_free,
                time_log_ids=[str(i) for i in line.time_log_ids],
            )
        )
        invoiced_ids.extend(line.time_log_ids)

    # Mark logs so they are not billed twice
    for log in db.execute(select(TimeLog).where(TimeLog.time_log_id.in_(invoiced_ids))).scalars():
        log.invoice_id = invoice.invoice_id

    db.commit()
    db.refresh(invoice)

    logger.info(
        f"Generated invoice {invoice.invoice_number} for appointment {apt.appointment_id}: "
        f"{len(draft.lines)} lines, total {draft.total}"
    )
    return InvoiceOut(
        invoice_id=invoice.invoice_id,
        invoice_number=invoice.invoice_number,
        status=invoice.status,
        created_at=invoice.created_at,
        appointment_id=apt.appointment_id,
        lines=draft.lines,
        subtotal=draft.subtotal,
        tax_total=draft.tax_total,
        total=draft.total,
    )


def invoice_out(db: Session, invoice: Invoice) -> InvoiceOut:
    lines = db.execute(
        select(InvoiceLineItem).where(InvoiceLineItem.invoice_id == invoice.invoice_id)
    ).scalars().all()
    return InvoiceOut(
        invoice_id=invoice.invoice_id,
        invoice_number=invoice.invoice_number,
        status=invoice.status,
        created_at=invoice.created_at,
        appointment_id=invoice.appointment_id,
        lines=[
            InvoiceLineDraft(
                description=li.description,
                worker_id=li.worker_id,
                quantity=li.quantity,
                unit_price=li.unit_price,
                line_total=li.line_total,
                is_gst_free=li.is_gst_free,
                time_log_ids=li.time_log_ids or [],
            )
            for li in lines
        ],
        subtotal=invoice.subtotal,
        tax_total=invoice.tax_total,
        total=invoice.total,
    )
