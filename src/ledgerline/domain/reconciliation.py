"""Statement reconciliation.

A statement is reconciled when every transaction tagged to it has been
checked off and the book balance (starting balance plus the tagged
transactions) agrees with the balance printed on the statement. The pure
functions here compute that state and propose pairings between untagged
book transactions and statement rows; ``ReconciliationService`` reads the
inputs from the database and writes the resulting state changes.
"""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerline.database.base import Database
from ledgerline.domain.entities import (
    MatchSuggestion,
    ReconciliationReport,
    ReconciliationSummary,
    Transaction,
)
from ledgerline.domain.errors import (
    NotFoundError,
    statement_not_found,
    transaction_not_found,
)
from ledgerline.log import get_logger
from ledgerline.utils.date_parser import days_apart

logger = get_logger(__name__)

RECONCILE_TOLERANCE = Decimal("0.01")
MATCH_WINDOW_DAYS = 2

WINDOW_START = date(1900, 1, 1)
WINDOW_END = date(2100, 12, 31)


def book_ending_balance(
    starting_balance: Optional[Decimal], statement_transactions: Iterable[Transaction]
) -> Decimal:
    """Starting balance plus the signed amounts of the statement's transactions."""
    total = starting_balance if starting_balance is not None else Decimal("0")
    for txn in statement_transactions:
        total += txn.amount
    return total


def is_match(book: Transaction, statement: Transaction) -> bool:
    """Return True if two transactions look like the same bank movement.

    Amounts are compared by magnitude within one cent; dates may differ by
    up to two days to absorb posting delays.
    """
    if abs(abs(book.amount) - abs(statement.amount)) >= RECONCILE_TOLERANCE:
        return False
    return days_apart(book.date, statement.date) <= MATCH_WINDOW_DAYS


def suggest_matches(
    statement_transactions: Sequence[Transaction], book_transactions: Sequence[Transaction]
) -> list[MatchSuggestion]:
    """Pair book transactions with statement transactions greedily.

    Book transactions are visited in the given order and each takes the
    first unused statement transaction that matches it. The result depends
    on input order; it is not an optimal assignment.

    Args:
        statement_transactions: Transactions tagged to the statement
        book_transactions: Unreconciled transactions not tagged to it

    Returns:
        List of suggested pairs, each transaction used at most once
    """
    used_book: set[int] = set()
    used_statement: set[int] = set()
    suggestions = []

    for book in book_transactions:
        if book.id in used_book:
            continue
        for stmt in statement_transactions:
            if stmt.id in used_statement:
                continue
            if is_match(book, stmt):
                suggestions.append(MatchSuggestion(book_transaction=book, statement_transaction=stmt))
                used_book.add(book.id)
                used_statement.add(stmt.id)
                break

    return suggestions


def summarize_reconciliation(
    starting_balance: Optional[Decimal],
    statement_ending_balance: Optional[Decimal],
    statement_transactions: Sequence[Transaction],
    book_transactions: Sequence[Transaction],
) -> ReconciliationSummary:
    """Compute balances, completion readiness and match suggestions.

    Missing balances count as zero. The statement can be completed once it
    has at least one transaction, all of them are reconciled, and the book
    ending balance is within one cent of the statement's ending balance.
    """
    starting = starting_balance if starting_balance is not None else Decimal("0")
    ending = statement_ending_balance if statement_ending_balance is not None else Decimal("0")
    book_ending = book_ending_balance(starting, statement_transactions)
    difference = ending - book_ending

    can_complete = (
        len(statement_transactions) > 0
        and all(t.is_reconciled for t in statement_transactions)
        and abs(difference) < RECONCILE_TOLERANCE
    )

    return ReconciliationSummary(
        starting_balance=starting,
        statement_ending_balance=ending,
        book_ending_balance=book_ending,
        difference=difference,
        can_complete=can_complete,
        suggestions=suggest_matches(statement_transactions, book_transactions),
    )


class ReconciliationService:
    """Service for reconciling bank statements against the ledger."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_report(self, statement_id: int) -> ReconciliationReport:
        """Load a statement with its transactions and compute its summary.

        Book transactions are the unreconciled transactions inside the
        statement's date window that are not tagged to the statement. A
        statement without dates uses an unbounded window.

        Args:
            statement_id: Statement ID

        Returns:
            ReconciliationReport

        Raises:
            NotFoundError: If the statement doesn't exist
        """
        statement = self.db.get_statement(statement_id)
        if statement is None:
            raise NotFoundError(statement_not_found(statement_id))

        statement_txns = self.db.list_transactions(statement_id=statement_id)
        book_txns = self.db.list_transactions(
            start_date=statement.start_date or WINDOW_START,
            end_date=statement.end_date or WINDOW_END,
            exclude_statement_id=statement_id,
            is_reconciled=False,
        )

        summary = summarize_reconciliation(
            statement.starting_balance,
            statement.ending_balance,
            statement_txns,
            book_txns,
        )
        return ReconciliationReport(
            statement=statement,
            statement_transactions=statement_txns,
            book_transactions=book_txns,
            summary=summary,
        )

    def mark_transaction(
        self, transaction_id: int, reconciled: bool = True, on: Optional[date] = None
    ) -> None:
        """Check a transaction off (or back on) the reconciliation.

        Args:
            transaction_id: Transaction ID
            reconciled: New reconciled flag
            on: Reconciled date, defaults to today; ignored when clearing

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        reconciled_date = (on or date.today()) if reconciled else None
        self.db.set_transaction_reconciled(transaction_id, reconciled, reconciled_date)
        logger.debug("transaction_marked", transaction_id=transaction_id, reconciled=reconciled)

    def apply_suggestions(self, statement_id: int, on: Optional[date] = None) -> int:
        """Mark the book side of every current suggestion as reconciled.

        Statement-side rows are left alone; they are checked off separately.

        Returns:
            Number of book transactions marked
        """
        report = self.get_report(statement_id)
        reconciled_date = on or date.today()
        for suggestion in report.summary.suggestions:
            self.db.set_transaction_reconciled(
                suggestion.book_transaction.id, True, reconciled_date
            )
        count = len(report.summary.suggestions)
        logger.info("suggestions_applied", statement_id=statement_id, count=count)
        return count

    def complete(self, statement_id: int, now: Optional[datetime] = None) -> None:
        """Mark a statement reconciled.

        This does not re-check the balances; callers gate on
        ``summary.can_complete`` before calling it.

        Raises:
            NotFoundError: If the statement doesn't exist
        """
        if self.db.get_statement(statement_id) is None:
            raise NotFoundError(statement_not_found(statement_id))
        self.db.mark_statement_reconciled(statement_id, now or datetime.now(UTC))
        logger.info("reconciliation_completed", statement_id=statement_id)
