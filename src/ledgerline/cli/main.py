"""Main CLI entry point."""

import click
from ledgerline.database.factories import create_sqlite_database
from ledgerline.log import DEFAULT_LOG_LEVEL, LOG_LEVELS, LOG_LEVEL_ENV, configure_logging

# Import and register all commands at module level
from ledgerline.cli.commands import (
    account,
    import_cmd,
    add,
    view,
    categorize,
    rule,
    statement,
    reconcile,
    invoice,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERLINE_DB_PATH environment variable)",
    envvar="LEDGERLINE_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    help="Log level for diagnostic output on stderr",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Ledgerline - statements, categorization, reconciliation and invoices.

    Import bank statements, categorize transactions with learned rules,
    reconcile statements against your ledger, and track invoice payments.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
import_cmd.register_commands(cli)
add.register_commands(cli)
view.register_commands(cli)
categorize.register_commands(cli)
rule.register_commands(cli)
statement.register_commands(cli)
reconcile.register_commands(cli)
invoice.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
