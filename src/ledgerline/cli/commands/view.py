"""Transaction viewing command."""

import click
from ledgerline.cli.input_parsing import parse_date_or_exit
from ledgerline.domain.categories import category_name
from ledgerline.domain.transaction import TransactionService
from ledgerline.utils.amount_parser import format_money


@click.command("view")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--statement", type=int, help="Only transactions tagged to this statement")
@click.option("--unreconciled", is_flag=True, help="Only transactions not yet reconciled")
@click.pass_context
def view_transactions(
    ctx, start_date: str | None, end_date: str | None, statement: int | None, unreconciled: bool
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        statement_id=statement,
        is_reconciled=False if unreconciled else None,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'R':<2} {'Category':<24} {'Vendor / Description':<40}"
    )
    click.echo("-" * 100)

    for txn in transactions:
        label = (txn.vendor or txn.description or "")[:40]
        reconciled = "✓" if txn.is_reconciled else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {format_money(txn.amount):>12} {reconciled:<2} "
            f"{category_name(txn.category):<24} {label:<40}"
        )


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_transactions)
