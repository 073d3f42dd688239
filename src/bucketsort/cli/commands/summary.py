"""Bucket summary command."""

import click

from bucketsort.cli.context import run, summary_service, user_id


@click.command("summary")
@click.pass_context
def show_summary(ctx):
    """Show totals of the sorted transactions per bucket."""
    summaries = run(summary_service(ctx).build_bucket_summary(user_id(ctx)))
    if not summaries:
        click.echo("No buckets or transactions found.")
        return

    click.echo(f"\n{'Bucket':<20} {'Count':>6} {'Expenses':>14} {'Income':>14} {'Total':>14}")
    click.echo("-" * 72)
    for item in summaries:
        click.echo(
            f"{item.category_name:<20} {item.count:>6} "
            f"{item.expenses:>14,.2f} {item.income:>14,.2f} {item.total:>14,.2f}"
        )

    count = sum(item.count for item in summaries)
    total = sum((item.total for item in summaries), start=0)
    click.echo("-" * 72)
    click.echo(f"{'Total':<20} {count:>6} {'':>14} {'':>14} {total:>14,.2f}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(show_summary)
