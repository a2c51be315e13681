"""Bank statement management commands."""

import click
from ledgerline.cli.account_resolution import resolve_account_or_exit
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from ledgerline.domain.account import AccountService
from ledgerline.domain.statement import StatementService
from ledgerline.utils.amount_parser import format_money


def _money_or_dash(amount) -> str:
    return format_money(amount) if amount is not None else "-"


@click.group()
def statement_group():
    """Manage bank statements."""
    pass


@statement_group.command("create")
@click.option("--account", help="Bank account name or ID")
@click.option("--start-date", help="First day of the statement period")
@click.option("--end-date", help="Last day of the statement period")
@click.option("--starting-balance", help="Opening balance")
@click.option("--ending-balance", help="Closing balance")
@click.option("--filename", help="Source document name")
@click.pass_context
def create_statement(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    starting_balance: str | None,
    ending_balance: str | None,
    filename: str | None,
):
    """Declare a statement period without importing a file.

    Examples:
        ledgerline statement create --account Chase --start-date 2024-01-01 \\
            --end-date 2024-01-31 --starting-balance 1000 --ending-balance 1150
    """
    db = ctx.obj["db"]
    service = StatementService(db)

    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    opening = parse_amount_or_exit(ctx, starting_balance, "starting balance")
    closing = parse_amount_or_exit(ctx, ending_balance, "ending balance")

    try:
        statement_id = service.create_statement(
            bank_account_id=account_id,
            filename=filename,
            start_date=start,
            end_date=end,
            starting_balance=opening,
            ending_balance=closing,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created statement {statement_id}")


@statement_group.command("list")
@click.option("--account", help="Bank account name or ID")
@click.pass_context
def list_statements(ctx, account: str | None):
    """List statements, newest first."""
    db = ctx.obj["db"]
    service = StatementService(db)

    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    statements = service.list_statements(bank_account_id=account_id)
    if not statements:
        click.echo("No statements found.")
        return

    click.echo(f"\n{'ID':<5} {'Period':<25} {'Start':>12} {'End':>12} {'Txns':>5}  Status")
    click.echo("-" * 80)
    for s in statements:
        period = f"{s.start_date or '?'} to {s.end_date or '?'}"
        status = "reconciled" if s.reconciled else "open"
        click.echo(
            f"{s.id:<5} {period:<25} {_money_or_dash(s.starting_balance):>12} "
            f"{_money_or_dash(s.ending_balance):>12} {s.transaction_count:>5}  {status}"
        )


@statement_group.command("balances")
@click.argument("statement_id", type=int)
@click.option("--starting-balance", help="Opening balance")
@click.option("--ending-balance", help="Closing balance")
@click.pass_context
def set_balances(ctx, statement_id: int, starting_balance: str | None, ending_balance: str | None):
    """Set the opening and/or closing balance of an open statement."""
    service = StatementService(ctx.obj["db"])

    opening = parse_amount_or_exit(ctx, starting_balance, "starting balance")
    closing = parse_amount_or_exit(ctx, ending_balance, "ending balance")
    if opening is None and closing is None:
        click.echo("Error: Provide --starting-balance and/or --ending-balance", err=True)
        ctx.exit(1)

    try:
        service.update_balances(statement_id, starting_balance=opening, ending_balance=closing)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated balances for statement {statement_id}")


def register_commands(cli):
    """Register statement commands with main CLI."""
    cli.add_command(statement_group, name="statement")
