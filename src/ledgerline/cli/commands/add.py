"""Add transaction command."""

import click
from ledgerline.cli.account_resolution import resolve_account_or_exit
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from ledgerline.domain.account import AccountService
from ledgerline.domain.categories import category_name
from ledgerline.domain.entities import RuleCandidate, TRANSACTION_TYPES
from ledgerline.domain.rules import CategoryRuleService
from ledgerline.domain.transaction import TransactionService
from ledgerline.utils.amount_parser import format_money


@click.command("add")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--type", "txn_type", required=True, type=click.Choice(TRANSACTION_TYPES), help="income or expense")
@click.option("--vendor", help="Vendor or payer")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category ID (suggested from rules if omitted)")
@click.option("--account", help="Bank account name or ID")
@click.option("--statement", type=int, help="Statement ID to tag the transaction with")
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    amount: str,
    txn_type: str,
    vendor: str | None,
    description: str | None,
    category: str | None,
    account: str | None,
    statement: int | None,
    notes: str | None,
):
    """Add a transaction manually.

    Examples:
        ledgerline add --date 2024-01-15 --amount 50.00 --type expense --vendor "Whole Foods"
        ledgerline add --date today --amount 2000 --type income --category salary
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    txn_date = parse_date_or_exit(ctx, date)
    txn_amount = parse_amount_or_exit(ctx, amount)

    suggested = False
    if category is None:
        category = CategoryRuleService(db).suggest_category(
            RuleCandidate(vendor=vendor, description=description, type=txn_type)
        )
        suggested = category is not None

    try:
        transaction_id = transaction_service.create_transaction(
            date=txn_date,
            amount=txn_amount,
            type=txn_type,
            vendor=vendor,
            description=description,
            category=category,
            statement_id=statement,
            bank_account_id=account_id,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn = transaction_service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {format_money(txn.amount)}")
    if vendor:
        click.echo(f"  Vendor: {vendor}")
    if description:
        click.echo(f"  Description: {description}")
    if category:
        click.echo(f"  Category: {category_name(category)}{' (from rules)' if suggested else ''}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
