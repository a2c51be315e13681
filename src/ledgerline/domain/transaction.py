"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal
from ledgerline.database.base import Database
from ledgerline.domain.categories import require_category
from ledgerline.domain.entities import (
    RuleDraft,
    Transaction as TransactionEntity,
    TRANSACTION_TYPES,
)
from ledgerline.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    invalid_choice,
    statement_already_reconciled,
    statement_not_found,
    transaction_not_found,
)
from ledgerline.domain.rules import build_suggested_rule
from ledgerline.log import get_logger

logger = get_logger(__name__)


def signed_amount(amount: Decimal, txn_type: str) -> Decimal:
    """Apply the ledger sign convention: income positive, expense negative."""
    magnitude = abs(amount)
    return -magnitude if txn_type == "expense" else magnitude


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

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
        """Create a transaction.

        The stored amount is signed from ``type``; the sign of ``amount``
        itself is ignored.

        Args:
            date: Transaction date
            amount: Transaction amount
            type: income or expense
            vendor: Optional vendor
            description: Optional description
            category: Optional category ID
            statement_id: Optional statement to tag the transaction with
            bank_account_id: Optional bank account ID
            notes: Optional notes

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount is zero, or the type or category is invalid
            NotFoundError: If the statement or account doesn't exist
            ConflictError: If the statement is already reconciled
        """
        if type not in TRANSACTION_TYPES:
            raise ValidationError(invalid_choice("transaction type", type, TRANSACTION_TYPES))
        if amount == 0:
            raise ValidationError("Transaction amount cannot be zero")
        if category is not None:
            require_category(category)

        if statement_id is not None:
            statement = self.db.get_statement(statement_id)
            if statement is None:
                raise NotFoundError(statement_not_found(statement_id))
            if statement.reconciled:
                raise ConflictError(statement_already_reconciled(statement_id))

        if bank_account_id is not None and self.db.get_account(bank_account_id) is None:
            raise NotFoundError(account_not_found(bank_account_id))

        return self.db.create_transaction(
            date=date,
            amount=signed_amount(amount, type),
            type=type,
            vendor=vendor,
            description=description,
            category=category,
            statement_id=statement_id,
            bank_account_id=bank_account_id,
            notes=notes,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statement_id: Optional[int] = None,
        is_reconciled: Optional[bool] = None,
    ) -> list[TransactionEntity]:
        """List transactions, newest first.

        Args:
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            statement_id: Optional statement filter
            is_reconciled: Optional reconciled-flag filter

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            statement_id=statement_id,
            is_reconciled=is_reconciled,
        )

    def update_category(self, transaction_id: int, category: Optional[str]) -> Optional[RuleDraft]:
        """Update transaction category.

        When the category actually changes, a rule that would have made the
        same choice is suggested. The suggestion is not saved; pass it to
        ``CategoryRuleService.save_draft`` to keep it.

        Args:
            transaction_id: Transaction ID
            category: Category ID, or None to clear

        Returns:
            Suggested RuleDraft, or None

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If the category is unknown
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if category is not None:
            require_category(category)

        if category == txn.category:
            return None

        self.db.update_transaction_category(transaction_id, category)
        logger.info(
            "transaction_categorized",
            transaction_id=transaction_id,
            old_category=txn.category,
            category=category,
        )

        if category is None:
            return None
        return build_suggested_rule(
            new_category=category,
            vendor=txn.vendor,
            description=txn.description,
            txn_type=txn.type,
            old_category=txn.category,
        )
