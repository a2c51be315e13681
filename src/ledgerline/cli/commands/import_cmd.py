"""Statement import command."""

from pathlib import Path

import click
from ledgerline.cli.account_resolution import resolve_account_or_exit
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.cli.input_parsing import parse_amount_or_exit
from ledgerline.domain.account import AccountService
from ledgerline.domain.categories import category_name, require_category
from ledgerline.domain.statement_import import StatementImportService
from ledgerline.utils.amount_parser import format_money


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", help="Bank account name or ID")
@click.option("--starting-balance", help="Opening balance printed on the statement")
@click.option("--ending-balance", help="Closing balance printed on the statement")
@click.option("--default-category", help="Category for rows no rule matches")
@click.option("--dry-run", is_flag=True, help="Show what would be imported without saving")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    account: str | None,
    starting_balance: str | None,
    ending_balance: str | None,
    default_category: str | None,
    dry_run: bool,
):
    """Import transactions from a bank statement CSV file.

    Columns are detected from the header row, so most bank exports work
    without any configuration.

    Examples:
        ledgerline import january.csv --account Chase --ending-balance 1523.40
        ledgerline import january.csv --dry-run
    """
    db = ctx.obj["db"]
    service = StatementImportService(db)

    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    opening = parse_amount_or_exit(ctx, starting_balance, "starting balance")
    closing = parse_amount_or_exit(ctx, ending_balance, "ending balance")

    path = Path(statement_file)
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        content = f.read()

    if dry_run:
        if default_category is not None:
            try:
                require_category(default_category)
            except ValueError as e:
                handle_domain_error(ctx, e)
        rows, metadata = service.preview(content)
        if not rows:
            click.echo("No data found in statement.")
            return
        click.echo(f"\nWould import {len(rows)} transaction(s) ({metadata.start_date} to {metadata.end_date}):")
        click.echo("-" * 90)
        for row in rows:
            txn = row.transaction
            category = row.category or default_category
            click.echo(
                f"{str(txn.date):<12} {txn.type:<8} {format_money(txn.amount):>12}  "
                f"{category_name(category):<22} {txn.description[:30]}"
            )
        return

    try:
        result = service.import_statement(
            content,
            filename=path.name,
            bank_account_id=account_id,
            starting_balance=opening,
            ending_balance=closing,
            default_category=default_category,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if result["statement_id"] is None:
        click.echo("No data found in statement.")
        return

    click.echo("\nImport complete:")
    click.echo(f"  Statement: {result['statement_id']}")
    click.echo(f"  Period: {result['start_date']} to {result['end_date']}")
    click.echo(f"  Imported: {result['imported']} transactions")
    click.echo(f"  Categorized by rules: {result['categorized']}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
