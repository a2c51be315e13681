"""Category rule management commands."""

import click
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.domain.entities import RULE_APPLIES_TO, RULE_MATCH_TYPES
from ledgerline.domain.rules import DEFAULT_RULE_PRIORITY, CategoryRuleService


@click.group()
def rule_group():
    """Manage categorization rules."""
    pass


@rule_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide disabled rules")
@click.pass_context
def list_rules(ctx, active_only: bool):
    """List rules in the order they are evaluated."""
    service = CategoryRuleService(ctx.obj["db"])

    rules = service.list_rules(active_only=active_only)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo(f"\n{'ID':<5} {'Pri':<5} {'Active':<7} {'Type':<21} {'Applies':<8} {'Category':<18} Value")
    click.echo("-" * 90)
    for r in rules:
        active = "yes" if r.is_active else "no"
        click.echo(
            f"{r.id:<5} {r.priority:<5} {active:<7} {r.match_type:<21} {r.applies_to:<8} "
            f"{r.category:<18} {r.match_value}"
        )


@rule_group.command("add")
@click.option("--match-type", required=True, type=click.Choice(RULE_MATCH_TYPES), help="How the value is compared")
@click.option("--value", "match_value", required=True, help="Text to match (case-insensitive)")
@click.option("--category", required=True, help="Category ID to assign")
@click.option("--applies-to", type=click.Choice(RULE_APPLIES_TO), default="both", show_default=True)
@click.option("--priority", type=int, default=DEFAULT_RULE_PRIORITY, show_default=True, help="Lower runs first")
@click.pass_context
def add_rule(ctx, match_type: str, match_value: str, category: str, applies_to: str, priority: int):
    """Add a rule, or update the category of an existing rule with the same match.

    Examples:
        ledgerline rule add --match-type vendor_contains --value starbucks --category meals
        ledgerline rule add --match-type description_contains --value payroll --category salary --applies-to income
    """
    service = CategoryRuleService(ctx.obj["db"])

    try:
        rule_id, created = service.upsert_rule(
            match_type=match_type,
            match_value=match_value,
            category=category,
            applies_to=applies_to,
            priority=priority,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if created:
        click.echo(f"Created rule {rule_id}")
    else:
        click.echo(f"Updated existing rule {rule_id}")


def _set_active(ctx, rule_id: int, is_active: bool) -> None:
    service = CategoryRuleService(ctx.obj["db"])
    try:
        service.set_active(rule_id, is_active)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rule {rule_id} {'enabled' if is_active else 'disabled'}")


@rule_group.command("enable")
@click.argument("rule_id", type=int)
@click.pass_context
def enable_rule(ctx, rule_id: int):
    """Enable a rule."""
    _set_active(ctx, rule_id, True)


@rule_group.command("disable")
@click.argument("rule_id", type=int)
@click.pass_context
def disable_rule(ctx, rule_id: int):
    """Disable a rule without deleting it."""
    _set_active(ctx, rule_id, False)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule permanently."""
    service = CategoryRuleService(ctx.obj["db"])

    rule = service.get_rule(rule_id)
    if rule is None:
        click.echo(f"Error: Rule {rule_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete rule {rule_id} ({rule.match_type} '{rule.match_value}')?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_rule(rule_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted rule {rule_id}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
