from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from fieldops.scheduling.errors import SchedulingValidationError
from fieldops.scheduling.invoicing import build_invoice_draft, is_billable
from fieldops.schemas.time_logs import TimeLogSnapshot, TimeLogStatus

APPOINTMENT = uuid4()
SAM = uuid4()
ALEX = uuid4()


def log(worker_id, name, hours, rate="50", status=TimeLogStatus.completed, invoice_id=None, closed=True):
    clock_in = datetime(2025, 2, 3, 8, 0)
    return TimeLogSnapshot(
        time_log_id=uuid4(),
        appointment_id=APPOINTMENT,
        worker_id=worker_id,
        worker_name=name,
        clock_in=clock_in,
        clock_out=clock_in.replace(hour=8 + hours) if closed else None,
        hourly_rate=Decimal(rate),
        total_hours=Decimal(hours).quantize(Decimal("0.01")) if closed else None,
        status=status,
        invoice_id=invoice_id,
    )


class TestInvoiceDraft:
    def test_groups_per_worker_and_applies_gst(self):
        logs = [log(SAM, "Sam", 2), log(SAM, "Sam", 2), log(ALEX, "Alex", 3, rate="60")]
        draft = build_invoice_draft(logs, gst_rate=Decimal("0.10"), appointment_id=APPOINTMENT)

        assert [line.description for line in draft.lines] == ["Labour - Alex (3.00 h)", "Labour - Sam (4.00 h)"]
        assert draft.lines[1].line_total == Decimal("200.00")
        assert len(draft.lines[1].time_log_ids) == 2
        assert draft.subtotal == Decimal("380.00")
        assert draft.tax_total == Decimal("38.00")
        assert draft.total == Decimal("418.00")

    def test_skips_unbillable_logs(self):
        logs = [
            log(SAM, "Sam", 2),
            log(SAM, "Sam", 2, status=TimeLogStatus.in_progress, closed=False),
            log(SAM, "Sam", 2, invoice_id=uuid4()),
        ]
        draft = build_invoice_draft(logs)
        assert len(draft.lines) == 1
        assert draft.lines[0].quantity == Decimal("2.00")

    def test_rate_override(self):
        draft = build_invoice_draft([log(SAM, "Sam", 2)], rate_overrides={SAM: Decimal("85")})
        assert draft.lines[0].unit_price == Decimal("85.00")
        assert draft.subtotal == Decimal("170.00")

    def test_gst_free(self):
        draft = build_invoice_draft([log(SAM, "Sam", 2)], gst_free=True)
        assert draft.tax_total == Decimal("0.00")
        assert draft.total == draft.subtotal

    def test_nothing_to_bill(self):
        with pytest.raises(SchedulingValidationError):
            build_invoice_draft([log(SAM, "Sam", 2, status=TimeLogStatus.in_progress, closed=False)])

    def test_approved_logs_are_billable(self):
        assert is_billable(log(SAM, "Sam", 1, status=TimeLogStatus.approved)) is True
