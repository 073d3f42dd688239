"""Main CLI entry point."""

import asyncio

import click

from bucketsort.cli.error_handling import handle_domain_error
from bucketsort.config import Settings
from bucketsort.database.factories import create_sqlite_store
from bucketsort.domain.errors import DomainError
from bucketsort.logging_setup import configure_logging

# Import and register all commands at module level
from bucketsort.cli.commands import (
    category,
    detect,
    import_cmd,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUCKETSORT_DB_PATH environment variable)",
    envvar="BUCKETSORT_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default="local",
    show_default=True,
    envvar="BUCKETSORT_USER",
    help="User whose transactions and buckets are used",
)
@click.option(
    "--lookback-years",
    type=click.IntRange(min=1),
    help="Years of stored transactions checked for duplicates (default: 5)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline progress to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, lookback_years: int | None, verbose: bool):
    """Bucketsort - sort bank statement transactions into buckets.

    Import CSV or Excel statements, skip transactions that were already
    sorted, and assign each new one to a bucket.
    """
    ctx.ensure_object(dict)

    # Open the store only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = Settings.from_env().with_overrides(lookback_years=lookback_years)
        except DomainError as e:
            handle_domain_error(ctx, e)
        configure_logging("INFO" if verbose else settings.log_level)

        store = create_sqlite_store(database_path=db_path)
        ctx.obj["store"] = store
        ctx.obj["settings"] = settings
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(lambda: asyncio.run(store.disconnect()))


# Register all commands
import_cmd.register_commands(cli)
detect.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
