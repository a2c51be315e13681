"""Bank account domain service."""

from typing import Optional
from ledgerline.database.base import Database
from ledgerline.domain.entities import BankAccount as BankAccountEntity
from ledgerline.domain.errors import ConflictError, ValidationError
from ledgerline.log import get_logger

logger = get_logger(__name__)


class AccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, name: str, bank_name: str, last_four: Optional[str] = None) -> int:
        """Create a new bank account.

        Args:
            name: Account name
            bank_name: Bank name
            last_four: Optional last four digits of the account number

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is blank or last_four is malformed
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        if last_four is not None and (len(last_four) != 4 or not last_four.isdigit()):
            raise ValidationError(f"last_four must be exactly 4 digits (got '{last_four}')")

        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        account_id = self.db.create_account(name=name, bank_name=bank_name, last_four=last_four)
        logger.info("account_created", account_id=account_id, name=name)
        return account_id

    def get_account(self, account_id: int) -> Optional[BankAccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[BankAccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
