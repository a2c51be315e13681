"""Utility for resolving bank account names to IDs."""

from ledgerline.domain.account import AccountService
from ledgerline.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve a bank account name or ID to its ID.

    Args:
        account_service: AccountService instance
        account: Account name, or ID as int or numeric string

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    for acc in account_service.list_accounts():
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
