"""Main CLI entry point."""

import logging

import click
from ledgerview.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerview.cli.commands import account, category, statement, seed

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERVIEW_DB_PATH environment variable)",
    envvar="LEDGERVIEW_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Enable logging at this level",
    envvar="LEDGERVIEW_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Ledgerview - Bank statement review and reconciliation.

    Review imported statements transaction by transaction, fix directions
    and amounts, and confirm a statement once its running balance matches
    the closing balance.
    """
    ctx.ensure_object(dict)

    if log_level:
        logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, force=True)

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
category.register_commands(cli)
statement.register_commands(cli)
seed.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
