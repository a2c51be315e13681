"""Statement reconciliation commands."""

import click
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.reconciliation import ReconciliationService
from ledgerline.utils.amount_parser import format_money


def _transaction_line(txn) -> str:
    mark = "[x]" if txn.is_reconciled else "[ ]"
    label = (txn.vendor or txn.description or "")[:40]
    return f"  {mark} {txn.id:<6} {str(txn.date):<12} {format_money(txn.amount):>12}  {label}"


@click.group()
def reconcile_group():
    """Reconcile statements against the ledger."""
    pass


@reconcile_group.command("status")
@click.argument("statement_id", type=int)
@click.pass_context
def reconcile_status(ctx, statement_id: int):
    """Show balances, transactions and match suggestions for a statement."""
    service = ReconciliationService(ctx.obj["db"])

    try:
        report = service.get_report(statement_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    summary = report.summary
    state = "reconciled" if report.statement.reconciled else "open"
    click.echo(f"\nStatement {statement_id} ({state})")
    click.echo("-" * 60)
    click.echo(f"  Starting balance:          {format_money(summary.starting_balance):>14}")
    click.echo(f"  Statement ending balance:  {format_money(summary.statement_ending_balance):>14}")
    click.echo(f"  Book ending balance:       {format_money(summary.book_ending_balance):>14}")
    click.echo(f"  Difference:                {format_money(summary.difference):>14}")
    click.echo(f"  Ready to complete: {'yes' if summary.can_complete else 'no'}")

    click.echo(f"\nStatement transactions ({len(report.statement_transactions)}):")
    for txn in report.statement_transactions:
        click.echo(_transaction_line(txn))

    if summary.suggestions:
        click.echo(f"\nSuggested matches ({len(summary.suggestions)}):")
        for s in summary.suggestions:
            book, stmt = s.book_transaction, s.statement_transaction
            click.echo(
                f"  book {book.id} ({book.date}, {format_money(book.amount)}) "
                f"<-> statement {stmt.id} ({stmt.date}, {format_money(stmt.amount)})"
            )


@reconcile_group.command("mark")
@click.argument("transaction_id", type=int)
@click.option("--undo", is_flag=True, help="Clear the reconciled flag instead")
@click.pass_context
def reconcile_mark(ctx, transaction_id: int, undo: bool):
    """Check a transaction off as reconciled."""
    service = ReconciliationService(ctx.obj["db"])

    try:
        service.mark_transaction(transaction_id, reconciled=not undo)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {transaction_id} {'unmarked' if undo else 'marked reconciled'}")


@reconcile_group.command("apply")
@click.argument("statement_id", type=int)
@click.pass_context
def reconcile_apply(ctx, statement_id: int):
    """Mark every suggested book transaction as reconciled."""
    service = ReconciliationService(ctx.obj["db"])

    try:
        count = service.apply_suggestions(statement_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Applied {count} suggested match(es)")


@reconcile_group.command("complete")
@click.argument("statement_id", type=int)
@click.option("--force", is_flag=True, help="Complete even if balances don't agree")
@click.pass_context
def reconcile_complete(ctx, statement_id: int, force: bool):
    """Mark a statement reconciled once its balances agree."""
    service = ReconciliationService(ctx.obj["db"])

    try:
        report = service.get_report(statement_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if report.statement.reconciled:
        click.echo(f"Statement {statement_id} is already reconciled")
        return

    if not report.summary.can_complete and not force:
        click.echo(
            f"Error: Statement {statement_id} cannot be completed yet "
            f"(difference {format_money(report.summary.difference)}; "
            "all statement transactions must be reconciled). Use --force to override.",
            err=True,
        )
        ctx.exit(1)

    service.complete(statement_id)
    click.echo(f"Statement {statement_id} reconciled")


def register_commands(cli):
    """Register reconcile commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
