"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

from ledgerline.domain.entities import (
    BankAccount,
    BankStatement,
    CategoryRule,
    Invoice,
    InvoicePayment,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for ledgerline.

    Implementations return domain entities, never ORM rows.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Bank account operations
    @abstractmethod
    def create_account(self, name: str, bank_name: str, last_four: Optional[str] = None) -> int:
        """Create a new bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[BankAccount]:
        """List all bank accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        date: date,
        amount: Decimal,
        type: str,
        vendor: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        statement_id: Optional[int] = None,
        bank_account_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statement_id: Optional[int] = None,
        exclude_statement_id: Optional[int] = None,
        is_reconciled: Optional[bool] = None,
    ) -> list[Transaction]:
        """List transactions, newest first.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            statement_id: Only transactions tagged with this statement
            exclude_statement_id: Drop transactions tagged with this statement
            is_reconciled: Optional reconciled-state filter
        """
        pass

    @abstractmethod
    def update_transaction_category(self, transaction_id: int, category: Optional[str]) -> None:
        """Update transaction category."""
        pass

    @abstractmethod
    def set_transaction_reconciled(
        self, transaction_id: int, is_reconciled: bool, reconciled_date: Optional[date]
    ) -> None:
        """Set the reconciled flag and date together."""
        pass

    # Bank statement operations
    @abstractmethod
    def create_statement(
        self,
        bank_account_id: Optional[int] = None,
        filename: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        starting_balance: Optional[Decimal] = None,
        ending_balance: Optional[Decimal] = None,
        total_deposits: Optional[Decimal] = None,
        total_withdrawals: Optional[Decimal] = None,
        transaction_count: int = 0,
    ) -> int:
        """Create a bank statement. Returns statement ID."""
        pass

    @abstractmethod
    def create_statement_with_transactions(
        self,
        transactions: Sequence[dict[str, Any]],
        bank_account_id: Optional[int] = None,
        filename: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        starting_balance: Optional[Decimal] = None,
        ending_balance: Optional[Decimal] = None,
        total_deposits: Optional[Decimal] = None,
        total_withdrawals: Optional[Decimal] = None,
    ) -> int:
        """Create a statement and its transactions in one unit of work.

        Each item of ``transactions`` holds ``create_transaction`` keyword
        arguments (without ``statement_id``). Either everything is written
        or nothing is.

        Returns:
            Statement ID
        """
        pass

    @abstractmethod
    def get_statement(self, statement_id: int) -> Optional[BankStatement]:
        """Get bank statement by ID."""
        pass

    @abstractmethod
    def list_statements(self, bank_account_id: Optional[int] = None) -> list[BankStatement]:
        """List bank statements, newest first."""
        pass

    @abstractmethod
    def update_statement_balances(
        self,
        statement_id: int,
        starting_balance: Optional[Decimal] = None,
        ending_balance: Optional[Decimal] = None,
    ) -> None:
        """Update whichever balances are provided."""
        pass

    @abstractmethod
    def mark_statement_reconciled(self, statement_id: int, reconciled_date: datetime) -> None:
        """Set the statement's reconciled flag and timestamp."""
        pass

    # Category rule operations
    @abstractmethod
    def create_rule(
        self,
        match_type: str,
        match_value: str,
        category: str,
        applies_to: str,
        priority: int,
        is_active: bool = True,
        confidence_source: str = "user",
    ) -> int:
        """Create a category rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[CategoryRule]:
        """Get category rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, active_only: bool = False) -> list[CategoryRule]:
        """List category rules."""
        pass

    @abstractmethod
    def update_rule(
        self,
        rule_id: int,
        category: Optional[str] = None,
        priority: Optional[int] = None,
        applies_to: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update whichever rule fields are provided."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a category rule."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        invoice_number: str,
        total: Decimal,
        status: str = "draft",
        due_date: Optional[date] = None,
    ) -> int:
        """Create an invoice with nothing paid. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by its number."""
        pass

    @abstractmethod
    def list_invoices(self, status: Optional[str] = None) -> list[Invoice]:
        """List invoices, optionally filtered by status."""
        pass

    @abstractmethod
    def update_invoice_status(self, invoice_id: int, status: str) -> None:
        """Update invoice status."""
        pass

    @abstractmethod
    def apply_invoice_payment(
        self,
        invoice_id: int,
        expected_version: int,
        amount_paid: Decimal,
        balance_due: Decimal,
        status: str,
        paid_date: Optional[date],
        payment_amount: Decimal,
        payment_date: date,
        payment_method: Optional[str] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Write new balance fields and a payment row if the version is unchanged.

        This is a compare-and-swap on the invoice's version. Returns False,
        writing nothing, when another writer got there first.
        """
        pass

    @abstractmethod
    def list_invoice_payments(self, invoice_id: int) -> list[InvoicePayment]:
        """List payments recorded against an invoice, oldest first."""
        pass
