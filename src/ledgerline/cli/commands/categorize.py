"""Category assignment command."""

import click
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.categories import category_name
from ledgerline.domain.rules import CategoryRuleService
from ledgerline.domain.transaction import TransactionService


@click.command("categorize")
@click.argument("transaction_id", type=int)
@click.argument("category")
@click.option("--learn", is_flag=True, help="Save a rule so similar transactions get this category")
@click.pass_context
def categorize_transaction(ctx, transaction_id: int, category: str, learn: bool):
    """Assign a category to a transaction.

    With --learn, a rule matching this transaction's vendor (or description)
    is saved so future imports are categorized the same way.

    Examples:
        ledgerline categorize 12 groceries
        ledgerline categorize 12 groceries --learn
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        draft = service.update_category(transaction_id=transaction_id, category=category)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transaction {transaction_id} categorized as '{category_name(category)}'")

    if draft is None:
        return

    if learn:
        rule_id, created = CategoryRuleService(db).save_draft(draft)
        verb = "Created" if created else "Updated"
        click.echo(f"{verb} rule {rule_id}: {draft.match_type} '{draft.match_value}' -> {draft.category}")
    else:
        click.echo(
            f"Tip: use --learn to always categorize {draft.match_type} "
            f"'{draft.match_value}' as {draft.category}"
        )


def register_commands(cli):
    """Register categorize command with main CLI."""
    cli.add_command(categorize_transaction)
