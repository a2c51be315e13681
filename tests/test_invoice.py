"""Tests for the invoice payment ledger."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerline.domain.entities import Invoice
from ledgerline.domain.errors import ConflictError, NotFoundError, ValidationError
from ledgerline.domain.invoice import InvoiceService, apply_payment


def make_invoice(total="500.00", amount_paid="0", status="sent", paid_date=None):
    total = Decimal(total)
    amount_paid = Decimal(amount_paid)
    return Invoice(
        id=1,
        invoice_number="INV-1",
        total=total,
        amount_paid=amount_paid,
        balance_due=max(Decimal("0"), total - amount_paid),
        status=status,
        version=1,
        created_at=datetime(2024, 1, 1),
        paid_date=paid_date,
    )


class TestApplyPayment:
    """Tests for the pure payment computation."""

    def test_partial_payment_leaves_status(self):
        update = apply_payment(make_invoice(status="viewed"), Decimal("200"), date(2024, 2, 1))

        assert update.amount_paid == Decimal("200")
        assert update.balance_due == Decimal("300.00")
        assert update.status == "viewed"
        assert update.paid_date is None

    def test_full_payment_marks_paid(self):
        invoice = make_invoice(amount_paid="200")
        update = apply_payment(invoice, Decimal("300"), date(2024, 2, 10))

        assert update.amount_paid == Decimal("500")
        assert update.balance_due == Decimal("0")
        assert update.status == "paid"
        assert update.paid_date == date(2024, 2, 10)

    def test_one_cent_overpayment_tolerated(self):
        update = apply_payment(make_invoice(amount_paid="200"), Decimal("300.01"), date(2024, 2, 10))

        assert update.balance_due == Decimal("0")
        assert update.status == "paid"

    def test_overpayment_rejected(self):
        with pytest.raises(ValidationError, match="exceeds balance due"):
            apply_payment(make_invoice(amount_paid="200"), Decimal("300.02"), date(2024, 2, 10))

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_non_positive_rejected(self, amount):
        with pytest.raises(ValidationError, match="greater than zero"):
            apply_payment(make_invoice(), Decimal(amount), date(2024, 2, 10))

    @pytest.mark.parametrize("amount", ["0.001", "0.01", "1"])
    def test_fully_paid_invoice_rejects_any_payment(self, amount):
        invoice = make_invoice(amount_paid="500", status="paid", paid_date=date(2024, 2, 10))
        with pytest.raises(ValidationError):
            apply_payment(invoice, Decimal(amount), date(2024, 2, 11))


class TestInvoiceService:
    """Tests for InvoiceService."""

    def test_create_invoice(self, invoice_service):
        invoice_id = invoice_service.create_invoice("INV-7", Decimal("120.00"), due_date=date(2024, 3, 1))

        invoice = invoice_service.get_invoice(invoice_id)
        assert invoice.invoice_number == "INV-7"
        assert invoice.total == Decimal("120.00")
        assert invoice.amount_paid == Decimal("0")
        assert invoice.balance_due == Decimal("120.00")
        assert invoice.status == "draft"
        assert invoice.due_date == date(2024, 3, 1)
        assert invoice.version == 1

    def test_duplicate_number_conflicts(self, invoice_service, sample_invoice):
        with pytest.raises(ConflictError):
            invoice_service.create_invoice("INV-1001", Decimal("1"))

    @pytest.mark.parametrize(
        "number,total,status",
        [("", "10", "draft"), ("INV-9", "0", "draft"), ("INV-9", "10", "archived")],
    )
    def test_create_validation(self, invoice_service, number, total, status):
        with pytest.raises(ValidationError):
            invoice_service.create_invoice(number, Decimal(total), status=status)

    def test_payments_200_then_300(self, invoice_service, sample_invoice):
        first = invoice_service.record_payment(sample_invoice.id, Decimal("200"), date(2024, 2, 1))
        assert first.amount_paid == Decimal("200.00")
        assert first.balance_due == Decimal("300.00")
        assert first.status == "sent"
        assert first.paid_date is None

        second = invoice_service.record_payment(
            sample_invoice.id, Decimal("300"), date(2024, 2, 15), payment_method="check", reference="1042"
        )
        assert second.amount_paid == Decimal("500.00")
        assert second.balance_due == Decimal("0")
        assert second.status == "paid"
        assert second.paid_date == date(2024, 2, 15)

        with pytest.raises(ValidationError):
            invoice_service.record_payment(sample_invoice.id, Decimal("0.01"), date(2024, 2, 16))

        payments = invoice_service.list_payments(sample_invoice.id)
        assert [p.amount for p in payments] == [Decimal("200.00"), Decimal("300.00")]
        assert payments[1].payment_method == "check"
        assert payments[1].reference == "1042"

    def test_rejected_payment_writes_nothing(self, invoice_service, sample_invoice):
        with pytest.raises(ValidationError):
            invoice_service.record_payment(sample_invoice.id, Decimal("600"), date(2024, 2, 1))

        invoice = invoice_service.get_invoice(sample_invoice.id)
        assert invoice.amount_paid == Decimal("0")
        assert invoice.version == sample_invoice.version
        assert invoice_service.list_payments(sample_invoice.id) == []

    def test_version_increments_per_payment(self, invoice_service, sample_invoice):
        invoice = invoice_service.record_payment(sample_invoice.id, Decimal("10"), date(2024, 2, 1))
        assert invoice.version == sample_invoice.version + 1

    def test_unknown_invoice(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.record_payment(999, Decimal("1"), date(2024, 2, 1))

    def test_set_status(self, invoice_service, sample_invoice):
        invoice_service.set_status(sample_invoice.id, "overdue")
        assert invoice_service.get_invoice(sample_invoice.id).status == "overdue"

        with pytest.raises(ValidationError):
            invoice_service.set_status(sample_invoice.id, "lost")

    def test_list_invoices_by_status(self, invoice_service, sample_invoice):
        invoice_service.create_invoice("INV-2", Decimal("10"))

        assert len(invoice_service.list_invoices()) == 2
        assert [i.invoice_number for i in invoice_service.list_invoices(status="sent")] == ["INV-1001"]


class ConcurrentWriter:
    """Database wrapper that lets another writer change the invoice first.

    Before each of the first ``conflicts`` payment writes, the invoice's
    status is touched through the same database, which bumps its version and
    makes the pending write stale.
    """

    def __init__(self, db, conflicts):
        self._db = db
        self.conflicts = conflicts
        self.attempts = 0

    def __getattr__(self, name):
        return getattr(self._db, name)

    def apply_invoice_payment(self, invoice_id, expected_version, **kwargs):
        self.attempts += 1
        if self.attempts <= self.conflicts:
            invoice = self._db.get_invoice(invoice_id)
            self._db.update_invoice_status(invoice_id, invoice.status)
        return self._db.apply_invoice_payment(
            invoice_id=invoice_id, expected_version=expected_version, **kwargs
        )


class TestOptimisticConcurrency:
    """Tests for conflict detection and retry in record_payment."""

    def test_retries_after_conflict(self, temp_db, sample_invoice):
        db = ConcurrentWriter(temp_db, conflicts=1)
        service = InvoiceService(db)

        invoice = service.record_payment(sample_invoice.id, Decimal("200"), date(2024, 2, 1))

        assert db.attempts == 2
        assert invoice.amount_paid == Decimal("200.00")
        assert len(service.list_payments(sample_invoice.id)) == 1

    def test_gives_up_after_max_attempts(self, temp_db, sample_invoice):
        db = ConcurrentWriter(temp_db, conflicts=5)
        service = InvoiceService(db, max_attempts=3)

        with pytest.raises(ConflictError):
            service.record_payment(sample_invoice.id, Decimal("200"), date(2024, 2, 1))

        assert db.attempts == 3
        invoice = temp_db.get_invoice(sample_invoice.id)
        assert invoice.amount_paid == Decimal("0")
        assert temp_db.list_invoice_payments(sample_invoice.id) == []

    def test_retry_recomputes_from_fresh_values(self, temp_db, sample_invoice):
        """A payment landing between read and write is not lost."""

        class InterleavedPayment(ConcurrentWriter):
            def apply_invoice_payment(self, invoice_id, expected_version, **kwargs):
                self.attempts += 1
                if self.attempts == 1:
                    InvoiceService(self._db).record_payment(invoice_id, Decimal("100"), date(2024, 2, 1))
                return self._db.apply_invoice_payment(
                    invoice_id=invoice_id, expected_version=expected_version, **kwargs
                )

        db = InterleavedPayment(temp_db, conflicts=0)
        service = InvoiceService(db)

        invoice = service.record_payment(sample_invoice.id, Decimal("200"), date(2024, 2, 2))

        assert invoice.amount_paid == Decimal("300.00")
        assert invoice.balance_due == Decimal("200.00")
