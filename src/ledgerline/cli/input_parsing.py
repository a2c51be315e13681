"""CLI helpers for parsing dates and money amounts from options."""

from datetime import date
from decimal import Decimal

import click

from ledgerline.utils.amount_parser import parse_amount
from ledgerline.utils.date_parser import parse_date


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str = "date") -> date | None:
    """Parse an optional date option, exiting with an error if it is invalid."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(
    ctx: click.Context, value: str | None, label: str = "amount"
) -> Decimal | None:
    """Parse an optional money option, exiting with an error if it is invalid."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
