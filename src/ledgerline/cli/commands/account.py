"""Bank account management commands."""

import click
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.account import AccountService


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.option("--last-four", help="Last four digits of the account number")
@click.pass_context
def create_account(ctx, name: str, bank: str | None, last_four: str | None):
    """Create a new bank account.

    If --bank is not provided, the bank name will be set to the account name.

    Examples:
        ledgerline account create "Chase"
        ledgerline account create "Business Checking" --bank "Chase" --last-four 1234
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    bank_name = bank if bank is not None else name

    try:
        account_id = service.create_account(name=name, bank_name=bank_name, last_four=last_four)
        click.echo(f"Created account '{name}' (ID: {account_id})")
        if bank is None:
            click.echo(f"Bank name set to '{bank_name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all bank accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        suffix = f" (...{acc.last_four})" if acc.last_four else ""
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name}{suffix}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
