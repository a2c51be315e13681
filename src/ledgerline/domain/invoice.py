"""Invoice payment ledger.

``apply_payment`` computes the new balance fields for an invoice after a
payment. ``InvoiceService.record_payment`` applies it against the stored
invoice with optimistic concurrency: every attempt re-reads the invoice and
the write only succeeds if nobody else changed the invoice in between.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerline.database.base import Database
from ledgerline.domain.entities import (
    Invoice,
    InvoicePayment,
    PaymentUpdate,
    INVOICE_STATUSES,
)
from ledgerline.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    invalid_choice,
    invoice_not_found,
    payment_conflict,
    payment_exceeds_balance,
    payment_not_positive,
)
from ledgerline.log import get_logger

logger = get_logger(__name__)

PAYMENT_TOLERANCE = Decimal("0.01")
DEFAULT_MAX_ATTEMPTS = 3


def apply_payment(invoice: Invoice, amount: Decimal, paid_on: date) -> PaymentUpdate:
    """Compute an invoice's balance fields after a payment.

    A payment may exceed the balance due by up to one cent to allow paying a
    rounded balance. The invoice becomes ``paid`` when less than one cent
    remains; a partial payment leaves status and paid date unchanged.

    Args:
        invoice: Current invoice state
        amount: Payment amount
        paid_on: Payment date

    Returns:
        PaymentUpdate with the new amount paid, balance due, status and paid date

    Raises:
        ValidationError: If the amount is not positive, the invoice is
            already fully paid, or the amount exceeds the balance due
    """
    if amount <= 0:
        raise ValidationError(payment_not_positive(amount))
    if invoice.balance_due < PAYMENT_TOLERANCE:
        raise ValidationError(f"Invoice {invoice.invoice_number} is already fully paid")
    if amount > invoice.balance_due + PAYMENT_TOLERANCE:
        raise ValidationError(payment_exceeds_balance(amount, invoice.balance_due))

    amount_paid = invoice.amount_paid + amount
    balance_due = max(Decimal("0"), invoice.total - amount_paid)

    if balance_due < PAYMENT_TOLERANCE:
        return PaymentUpdate(
            amount_paid=amount_paid, balance_due=balance_due, status="paid", paid_date=paid_on
        )
    return PaymentUpdate(
        amount_paid=amount_paid,
        balance_due=balance_due,
        status=invoice.status,
        paid_date=invoice.paid_date,
    )


class InvoiceService:
    """Service for invoices and their payments."""

    def __init__(self, db: Database, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        """Initialize invoice service.

        Args:
            db: Database instance
            max_attempts: How many read-compute-write cycles a payment gets
                before a concurrent-update conflict is reported
        """
        self.db = db
        self.max_attempts = max_attempts

    def create_invoice(
        self,
        invoice_number: str,
        total: Decimal,
        status: str = "draft",
        due_date: Optional[date] = None,
    ) -> int:
        """Create an invoice with nothing paid yet.

        Args:
            invoice_number: Unique invoice number
            total: Invoice total
            status: Initial status
            due_date: Optional due date

        Returns:
            Invoice ID

        Raises:
            ValidationError: If the number is blank, the total is not positive
                or the status is unknown
            ConflictError: If the invoice number is already used
        """
        invoice_number = invoice_number.strip()
        if not invoice_number:
            raise ValidationError("Invoice number cannot be empty")
        if total <= 0:
            raise ValidationError(f"Invoice total must be greater than zero (got {total})")
        if status not in INVOICE_STATUSES:
            raise ValidationError(invalid_choice("status", status, INVOICE_STATUSES))
        if self.db.get_invoice_by_number(invoice_number) is not None:
            raise ConflictError(f"Invoice number '{invoice_number}' already exists")

        invoice_id = self.db.create_invoice(
            invoice_number=invoice_number, total=total, status=status, due_date=due_date
        )
        logger.info("invoice_created", invoice_id=invoice_id, invoice_number=invoice_number)
        return invoice_id

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        return self.db.get_invoice(invoice_id)

    def require_invoice(self, invoice_id: int) -> Invoice:
        """Get invoice by ID, raising NotFoundError if it doesn't exist."""
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def list_invoices(self, status: Optional[str] = None) -> list[Invoice]:
        """List invoices, optionally filtered by status."""
        if status is not None and status not in INVOICE_STATUSES:
            raise ValidationError(invalid_choice("status", status, INVOICE_STATUSES))
        return self.db.list_invoices(status=status)

    def list_payments(self, invoice_id: int) -> list[InvoicePayment]:
        """List payments recorded against an invoice, oldest first."""
        self.require_invoice(invoice_id)
        return self.db.list_invoice_payments(invoice_id)

    def set_status(self, invoice_id: int, status: str) -> None:
        """Change an invoice's status.

        Raises:
            NotFoundError: If the invoice doesn't exist
            ValidationError: If the status is unknown
        """
        if status not in INVOICE_STATUSES:
            raise ValidationError(invalid_choice("status", status, INVOICE_STATUSES))
        self.require_invoice(invoice_id)
        self.db.update_invoice_status(invoice_id, status)

    def record_payment(
        self,
        invoice_id: int,
        amount: Decimal,
        paid_on: date,
        payment_method: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Invoice:
        """Record a payment against the invoice's current stored balance.

        Each attempt re-reads the invoice, computes the new balance, and
        writes it only if the invoice version is unchanged. A lost race is
        retried; after ``max_attempts`` lost races a ConflictError is raised
        and nothing is written.

        Args:
            invoice_id: Invoice ID
            amount: Payment amount
            paid_on: Payment date
            payment_method: Optional payment method
            reference: Optional reference (check number, transfer ID)
            notes: Optional notes

        Returns:
            The updated invoice

        Raises:
            NotFoundError: If the invoice doesn't exist
            ValidationError: If the payment is rejected
            ConflictError: If concurrent updates won every attempt
        """
        for attempt in range(1, self.max_attempts + 1):
            invoice = self.require_invoice(invoice_id)
            update = apply_payment(invoice, amount, paid_on)

            applied = self.db.apply_invoice_payment(
                invoice_id=invoice_id,
                expected_version=invoice.version,
                amount_paid=update.amount_paid,
                balance_due=update.balance_due,
                status=update.status,
                paid_date=update.paid_date,
                payment_amount=amount,
                payment_date=paid_on,
                payment_method=payment_method,
                reference=reference,
                notes=notes,
            )
            if applied:
                logger.info(
                    "payment_recorded",
                    invoice_id=invoice_id,
                    amount=str(amount),
                    balance_due=str(update.balance_due),
                    status=update.status,
                )
                return self.require_invoice(invoice_id)

            logger.warning("payment_conflict", invoice_id=invoice_id, attempt=attempt)

        raise ConflictError(payment_conflict(invoice_id, self.max_attempts))
