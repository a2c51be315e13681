"""Statement import domain service."""

from decimal import Decimal
from typing import Any, Optional

from ledgerline.database.base import Database
from ledgerline.domain.categories import require_category
from ledgerline.domain.entities import (
    ImportPreviewRow,
    ParsedTransaction,
    RuleCandidate,
    StatementMetadata,
)
from ledgerline.domain.errors import NotFoundError, account_not_found
from ledgerline.domain.rules import apply_rules
from ledgerline.domain.statement_parser import parse_statement
from ledgerline.domain.transaction import signed_amount
from ledgerline.log import get_logger

logger = get_logger(__name__)

MAX_VENDOR_LENGTH = 100


def _candidate(row: ParsedTransaction) -> RuleCandidate:
    # Statement rows carry a single text field; it stands in for the vendor too
    return RuleCandidate(vendor=row.description, description=row.description, type=row.type)


class StatementImportService:
    """Service for importing bank statement files."""

    def __init__(self, db: Database):
        """Initialize statement import service.

        Args:
            db: Database instance
        """
        self.db = db

    def preview(self, content: str) -> tuple[list[ImportPreviewRow], Optional[StatementMetadata]]:
        """Parse a statement and show the category each row would get.

        Args:
            content: Raw statement CSV text

        Returns:
            Tuple of (preview rows, statement metadata)
        """
        result = parse_statement(content)
        rules = self.db.list_rules(active_only=True)
        rows = [
            ImportPreviewRow(transaction=row, category=apply_rules(_candidate(row), rules))
            for row in result.transactions
        ]
        return rows, result.metadata

    def import_statement(
        self,
        content: str,
        filename: Optional[str] = None,
        bank_account_id: Optional[int] = None,
        starting_balance: Optional[Decimal] = None,
        ending_balance: Optional[Decimal] = None,
        default_category: Optional[str] = None,
    ) -> dict[str, Any]:
        """Import a statement: one statement record plus one transaction per row.

        Rows are categorized by the active rules, falling back to
        ``default_category``. If nothing parses, nothing is written.

        Args:
            content: Raw statement CSV text
            filename: Optional source file name
            bank_account_id: Optional bank account ID
            starting_balance: Optional opening balance
            ending_balance: Optional closing balance
            default_category: Category for rows no rule matches

        Returns:
            Dictionary with keys:
            - statement_id: New statement ID, or None if nothing was imported
            - imported: Number of transactions created
            - categorized: Number of transactions categorized by a rule
            - start_date: First transaction date, or None
            - end_date: Last transaction date, or None

        Raises:
            NotFoundError: If the bank account doesn't exist
            ValidationError: If the default category is unknown
        """
        if bank_account_id is not None and self.db.get_account(bank_account_id) is None:
            raise NotFoundError(account_not_found(bank_account_id))
        if default_category is not None:
            require_category(default_category)

        rows, metadata = self.preview(content)
        if not rows:
            logger.info("statement_empty", filename=filename)
            return {
                "statement_id": None,
                "imported": 0,
                "categorized": 0,
                "start_date": None,
                "end_date": None,
            }

        total_deposits = sum(
            (r.transaction.amount for r in rows if r.transaction.type == "income"), Decimal("0")
        )
        total_withdrawals = sum(
            (r.transaction.amount for r in rows if r.transaction.type == "expense"), Decimal("0")
        )

        categorized = 0
        transactions = []
        for row in rows:
            txn = row.transaction
            if row.category is not None:
                categorized += 1
            transactions.append(
                {
                    "date": txn.date,
                    "amount": signed_amount(txn.amount, txn.type),
                    "type": txn.type,
                    "vendor": txn.description[:MAX_VENDOR_LENGTH],
                    "description": txn.description,
                    "category": row.category or default_category,
                    "bank_account_id": bank_account_id,
                }
            )

        # Statement and rows are written together or not at all
        statement_id = self.db.create_statement_with_transactions(
            transactions,
            bank_account_id=bank_account_id,
            filename=filename,
            start_date=metadata.start_date,
            end_date=metadata.end_date,
            starting_balance=starting_balance,
            ending_balance=ending_balance,
            total_deposits=total_deposits,
            total_withdrawals=total_withdrawals,
        )

        logger.info(
            "statement_imported",
            statement_id=statement_id,
            filename=filename,
            imported=len(rows),
            categorized=categorized,
        )
        return {
            "statement_id": statement_id,
            "imported": len(rows),
            "categorized": categorized,
            "start_date": metadata.start_date,
            "end_date": metadata.end_date,
        }
