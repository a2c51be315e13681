"""Bank statement domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerline.database.base import Database
from ledgerline.domain.entities import BankStatement as BankStatementEntity
from ledgerline.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    statement_already_reconciled,
    statement_not_found,
)
from ledgerline.log import get_logger

logger = get_logger(__name__)


class StatementService:
    """Service for managing bank statements."""

    def __init__(self, db: Database):
        """Initialize statement service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_statement(
        self,
        bank_account_id: Optional[int] = None,
        filename: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        starting_balance: Optional[Decimal] = None,
        ending_balance: Optional[Decimal] = None,
    ) -> int:
        """Declare a statement period, e.g. for reconciling manual entries.

        Args:
            bank_account_id: Optional bank account ID
            filename: Optional source file name
            start_date: Optional first day of the period
            end_date: Optional last day of the period
            starting_balance: Optional opening balance
            ending_balance: Optional closing balance

        Returns:
            Statement ID

        Raises:
            NotFoundError: If the bank account doesn't exist
            ValidationError: If the period ends before it starts
        """
        if bank_account_id is not None and self.db.get_account(bank_account_id) is None:
            raise NotFoundError(account_not_found(bank_account_id))
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError(
                f"Statement start date {start_date} is after end date {end_date}"
            )

        statement_id = self.db.create_statement(
            bank_account_id=bank_account_id,
            filename=filename,
            start_date=start_date,
            end_date=end_date,
            starting_balance=starting_balance,
            ending_balance=ending_balance,
        )
        logger.info("statement_created", statement_id=statement_id)
        return statement_id

    def get_statement(self, statement_id: int) -> Optional[BankStatementEntity]:
        """Get statement by ID.

        Args:
            statement_id: Statement ID

        Returns:
            Statement entity or None if not found
        """
        return self.db.get_statement(statement_id)

    def list_statements(self, bank_account_id: Optional[int] = None) -> list[BankStatementEntity]:
        """List statements, newest first.

        Args:
            bank_account_id: Optional account filter

        Returns:
            List of statement entities
        """
        return self.db.list_statements(bank_account_id=bank_account_id)

    def update_balances(
        self,
        statement_id: int,
        starting_balance: Optional[Decimal] = None,
        ending_balance: Optional[Decimal] = None,
    ) -> None:
        """Set the opening and/or closing balance of an open statement.

        Raises:
            NotFoundError: If the statement doesn't exist
            ConflictError: If the statement is already reconciled
        """
        statement = self.db.get_statement(statement_id)
        if statement is None:
            raise NotFoundError(statement_not_found(statement_id))
        if statement.reconciled:
            raise ConflictError(statement_already_reconciled(statement_id))

        self.db.update_statement_balances(
            statement_id, starting_balance=starting_balance, ending_balance=ending_balance
        )
