"""Bucket management commands."""

import click

from bucketsort.cli.context import category_service, run, transaction_service, user_id
from bucketsort.cli.error_handling import handle_domain_error
from bucketsort.domain.errors import DomainError, category_name_not_found


def _resolve_category_id(ctx: click.Context, name: str) -> str:
    category = run(category_service(ctx).get_category_by_name(user_id(ctx), name))
    if category is None:
        click.echo(f"Error: {category_name_not_found(name)}", err=True)
        ctx.exit(1)
    return category.id


@click.group()
def category_group():
    """Manage buckets."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all buckets in creation order."""
    categories = run(category_service(ctx).get_categories(user_id(ctx)))
    if not categories:
        click.echo("No buckets found. Run 'category init' to create the default buckets.")
        return

    click.echo("\nBuckets:")
    for category in categories:
        color = f" {category.color}" if category.color else ""
        default = " (default)" if category.is_default else ""
        click.echo(f"  {category.name}{color}{default} (ID: {category.id})")


@category_group.command("add")
@click.argument("name")
@click.option("--color", help="Display color (e.g., '#3b82f6')")
@click.pass_context
def add_category(ctx, name: str, color: str | None):
    """Create a new bucket."""
    try:
        category_id = run(category_service(ctx).create_category(user_id(ctx), name, color=color))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created bucket '{name}' (ID: {category_id})")


@category_group.command("rename")
@click.argument("name")
@click.argument("new_name")
@click.pass_context
def rename_category(ctx, name: str, new_name: str):
    """Rename a bucket."""
    category_id = _resolve_category_id(ctx, name)
    try:
        run(category_service(ctx).update_category(user_id(ctx), category_id, name=new_name))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed bucket '{name}' to '{new_name}'")


@category_group.command("delete")
@click.argument("name")
@click.option("--move-to", help="Bucket that receives the deleted bucket's transactions")
@click.pass_context
def delete_category(ctx, name: str, move_to: str | None):
    """Delete a bucket.

    Transactions in the bucket keep pointing at it unless --move-to is given.
    """
    category_id = _resolve_category_id(ctx, name)
    target_id = _resolve_category_id(ctx, move_to) if move_to else None

    try:
        if target_id is not None:
            moved = run(
                transaction_service(ctx).move_transactions(user_id(ctx), category_id, target_id)
            )
            click.echo(f"Moved {moved} transaction{'s' if moved != 1 else ''} to '{move_to}'")
        run(category_service(ctx).delete_category(user_id(ctx), category_id))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted bucket '{name}'")


@category_group.command("init")
@click.pass_context
def init_categories(ctx):
    """Create the default buckets if none exist."""
    service = category_service(ctx)
    existing = run(service.get_categories(user_id(ctx)))
    if existing:
        click.echo(f"Buckets already exist ({len(existing)}); nothing to do.")
        return

    categories = run(service.ensure_default_categories(user_id(ctx)))
    click.echo(f"Created {len(categories)} default buckets:")
    for category in categories:
        click.echo(f"  {category.name}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
