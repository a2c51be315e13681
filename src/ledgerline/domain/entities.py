"""Domain model entities for ledgerline.

These are pure data classes representing business concepts, independent of
database schema. Persistence maps to and from them in
``ledgerline.database.mappers``; the core algorithms only ever see these.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Literal, Optional

TransactionType = Literal["income", "expense"]
RuleMatchType = Literal["vendor_exact", "vendor_contains", "description_contains"]
RuleAppliesTo = Literal["expense", "income", "both"]
InvoiceStatus = Literal["draft", "sent", "viewed", "paid", "overdue", "cancelled"]

TRANSACTION_TYPES = ("income", "expense")
RULE_MATCH_TYPES = ("vendor_exact", "vendor_contains", "description_contains")
RULE_APPLIES_TO = ("expense", "income", "both")
RULE_CONFIDENCE_SOURCES = ("user", "ai")
INVOICE_STATUSES = ("draft", "sent", "viewed", "paid", "overdue", "cancelled")


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: str
    created_at: datetime
    last_four: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction domain entity.

    ``amount`` is signed: income is positive, expense is negative.
    """

    id: int
    date: date
    amount: Decimal
    type: TransactionType
    vendor: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_reconciled: bool = False
    reconciled_date: Optional[date] = None
    statement_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class BankStatement:
    """One imported or declared reporting period for a bank account."""

    id: int
    bank_account_id: Optional[int]
    filename: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]
    starting_balance: Optional[Decimal]
    ending_balance: Optional[Decimal]
    reconciled: bool
    reconciled_date: Optional[datetime]
    created_at: datetime
    total_deposits: Optional[Decimal] = None
    total_withdrawals: Optional[Decimal] = None
    transaction_count: int = 0


@dataclass(frozen=True)
class CategoryRule:
    """Category rule domain entity."""

    id: int
    match_type: RuleMatchType
    match_value: str
    category: str
    applies_to: RuleAppliesTo
    priority: int
    is_active: bool
    created_at: datetime
    confidence_source: str = "user"
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity (payment tracking fields only)."""

    id: int
    invoice_number: str
    total: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    status: InvoiceStatus
    version: int
    created_at: datetime
    due_date: Optional[date] = None
    paid_date: Optional[date] = None


@dataclass(frozen=True)
class InvoicePayment:
    """A single payment recorded against an invoice."""

    id: int
    invoice_id: int
    amount: Decimal
    date: date
    created_at: datetime
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ParsedTransaction:
    """Normalized statement row. ``amount`` is always a positive magnitude."""

    date: date
    description: str
    amount: Decimal
    type: TransactionType


@dataclass(frozen=True)
class StatementMetadata:
    """Period covered by a parsed statement."""

    start_date: date
    end_date: date


@dataclass(frozen=True)
class ParseResult:
    """Output of the statement parser."""

    transactions: list[ParsedTransaction] = field(default_factory=list)
    metadata: Optional[StatementMetadata] = None


@dataclass(frozen=True)
class RuleCandidate:
    """Fields of a transaction that rules are evaluated against."""

    vendor: Optional[str] = None
    description: Optional[str] = None
    type: TransactionType = "expense"


@dataclass(frozen=True)
class RuleDraft:
    """A suggested rule that has not been persisted."""

    match_type: RuleMatchType
    match_value: str
    category: str
    applies_to: RuleAppliesTo
    priority: int = 100
    is_active: bool = True
    confidence_source: str = "user"


@dataclass(frozen=True)
class MatchSuggestion:
    """A proposed pairing of a book transaction with a statement transaction."""

    book_transaction: Transaction
    statement_transaction: Transaction


@dataclass(frozen=True)
class ReconciliationSummary:
    """Balances and suggestions computed for one statement."""

    starting_balance: Decimal
    statement_ending_balance: Decimal
    book_ending_balance: Decimal
    difference: Decimal
    can_complete: bool
    suggestions: list[MatchSuggestion] = field(default_factory=list)


@dataclass(frozen=True)
class ReconciliationReport:
    """Everything needed to review a statement reconciliation."""

    statement: BankStatement
    statement_transactions: list[Transaction]
    book_transactions: list[Transaction]
    summary: ReconciliationSummary


@dataclass(frozen=True)
class PaymentUpdate:
    """New balance fields for an invoice after a payment."""

    amount_paid: Decimal
    balance_due: Decimal
    status: InvoiceStatus
    paid_date: Optional[date]


@dataclass(frozen=True)
class ImportPreviewRow:
    """A parsed statement row together with its rule-suggested category."""

    transaction: ParsedTransaction
    category: Optional[str]
