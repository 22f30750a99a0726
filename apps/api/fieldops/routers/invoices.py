from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fieldops.core.database import get_db
from fieldops.models.invoice import Invoice
from fieldops.schemas.invoices import InvoiceGenerateRequest, InvoiceOut
from fieldops.services.invoice_service import generate_invoice, invoice_out

router = APIRouter()


@router.post("/appointments/{appointment_id}", response_model=InvoiceOut, status_code=201)
def generate(appointment_id: UUID, payload: InvoiceGenerateRequest, db: Session = Depends(get_db)):
    return generate_invoice(db, appointment_id, payload)


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(invoice_id: UUID, db: Session = Depends(get_db)):
    invoice = db.get(Invoice, invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice_out(db, invoice)
