"""Stored transaction commands."""

import click

from bucketsort.cli.context import category_service, run, transaction_service, user_id
from bucketsort.cli.error_handling import handle_domain_error
from bucketsort.domain.errors import DomainError, category_name_not_found, transaction_not_found
from bucketsort.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """View and delete sorted transactions."""
    pass


@transaction_group.command("list")
@click.option("--category", help="Only show transactions in this bucket")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True)
@click.pass_context
def list_transactions(ctx, category: str | None, limit: int):
    """List sorted transactions, newest first."""
    service = transaction_service(ctx)
    categories = {c.id: c.name for c in run(category_service(ctx).get_categories(user_id(ctx)))}

    if category:
        match = next((cid for cid, name in categories.items() if name.lower() == category.lower()), None)
        if match is None:
            click.echo(f"Error: {category_name_not_found(category)}", err=True)
            ctx.exit(1)
        transactions = run(service.get_transactions_by_category(user_id(ctx), match))[:limit]
    else:
        transactions = run(service.get_recent_transactions(user_id(ctx), limit=limit))

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':<14} {'Date':<10} {'Amount':>12}  {'Bucket':<16} Description")
    click.echo("-" * 80)
    for txn in transactions:
        bucket = categories.get(txn.category_id, "Unknown") if txn.category_id else "Uncategorized"
        click.echo(
            f"{txn.id:<14} {txn.date.isoformat():<10} {txn.amount:>12,.2f}  {bucket:<16} {txn.description}"
        )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--date", "date_str", required=True, help="Transaction date (selects the partition)")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, date_str: str):
    """Delete a sorted transaction."""
    service = transaction_service(ctx)
    try:
        when = parse_date(date_str)
        txn = run(service.get_transaction(user_id(ctx), transaction_id, when))
        if txn is None:
            click.echo(f"Error: {transaction_not_found(transaction_id)}", err=True)
            ctx.exit(1)
        run(service.delete_transaction(user_id(ctx), txn))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transactions")
