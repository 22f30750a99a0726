from __future__ import annotations

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional
from uuid import UUID

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.scheduling.timekeeping import compute_time_log_totals
from fieldops.schemas.invoices import InvoiceDraft, InvoiceLineDraft
from fieldops.schemas.time_logs import TimeLogSnapshot, TimeLogStatus

CENTS = Decimal("0.01")
BILLABLE_STATUSES = {TimeLogStatus.completed, TimeLogStatus.approved}


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def is_billable(log: TimeLogSnapshot) -> bool:
    return log.status in BILLABLE_STATUSES and log.clock_out is not None and log.invoice_id is None


def build_invoice_draft(
    time_logs: Iterable[TimeLogSnapshot],
    gst_rate: Decimal = Decimal("0.10"),
    rate_overrides: Optional[Mapping[UUID, Decimal]] = None,
    gst_free: bool = False,
    appointment_id: Optional[UUID] = None,
) -> InvoiceDraft:
    """
    One labour line per (worker, charge rate) over billable logs.

    Hours come from the stored total when present, otherwise from clock in/out.
    """
    rate_overrides = rate_overrides or {}
    billable = [log for log in time_logs if is_billable(log)]
    if not billable:
        raise SchedulingValidationError("no billable time logs")

    grouped: dict[tuple[UUID, Decimal], list[TimeLogSnapshot]] = defaultdict(list)
    names: dict[UUID, str] = {}
    for log in billable:
        rate = Decimal(str(rate_overrides.get(log.worker_id, log.hourly_rate)))
        grouped[(log.worker_id, rate)].append(log)
        names.setdefault(log.worker_id, log.worker_name)

    lines: list[InvoiceLineDraft] = []
    for (worker_id, rate), logs in sorted(grouped.items(), key=lambda kv: (names[kv[0][0]], str(kv[0][0]), kv[0][1])):
        hours = Decimal("0")
        for log in logs:
            if log.total_hours is not None:
                hours += log.total_hours
            else:
                log_hours, _ = compute_time_log_totals(log.clock_in, log.clock_out, log.hourly_rate, Decimal("0"))
                hours += log_hours

        label = names[worker_id] or "Worker"
        lines.append(
            InvoiceLineDraft(
                description=f"Labour - {label} ({hours} h)",
                worker_id=worker_id,
                quantity=hours,
                unit_price=_money(rate),
                line_total=_money(hours * rate),
                is_gst_free=gst_free,
                time_log_ids=[log.time_log_id for log in logs],
            )
        )

    subtotal = _money(sum((line.line_total for line in lines), Decimal("0")))
    taxable = sum((line.line_total for line in lines if not line.is_gst_free), Decimal("0"))
    tax_total = _money(taxable * Decimal(str(gst_rate)))

    return InvoiceDraft(
        appointment_id=appointment_id,
        lines=lines,
        subtotal=subtotal,
        tax_total=tax_total,
        total=subtotal + tax_total,
    )
