"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.account import AccountService
from ledgerline.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int | None
) -> int | None:
    """Resolve account name or ID, or exit with a CLI error.

    Returns None when no account was given.
    """
    if account is None:
        return None
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
