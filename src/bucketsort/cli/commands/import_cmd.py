"""Statement import and interactive sorting command."""

import click

from bucketsort.cli.context import category_service, run, transaction_service, user_id
from bucketsort.cli.error_handling import handle_domain_error
from bucketsort.domain.entities import CandidateTransaction, Category, ColumnMapping
from bucketsort.domain.errors import DomainError
from bucketsort.domain.ingest import FileIngestService
from bucketsort.domain.transaction import TransactionService

SKIP = "s"
QUIT = "q"


def echo_mapping(mapping: ColumnMapping) -> None:
    """Print a detected column mapping."""
    click.echo(f"  Date column: {mapping.date_column}")
    click.echo(f"  Description column: {mapping.description_column}")
    click.echo(f"  Amount column: {mapping.amount_column}")
    if mapping.raw_description_column:
        click.echo(f"  Original description column: {mapping.raw_description_column}")


def _describe(txn: CandidateTransaction) -> str:
    return f"{txn.date.isoformat()}  {txn.amount:>12,.2f}  {txn.description}"


def _prompt_bucket(categories: list[Category]) -> Category | str:
    choices = [str(i) for i in range(1, len(categories) + 1)] + [SKIP, QUIT]
    answer = click.prompt(
        f"Bucket [1-{len(categories)}, {SKIP}=skip, {QUIT}=quit]",
        type=click.Choice(choices),
        show_choices=False,
    )
    if answer in (SKIP, QUIT):
        return answer
    return categories[int(answer) - 1]


def sort_into_buckets(
    ctx: click.Context,
    service: TransactionService,
    categories: list[Category],
    transactions: list[CandidateTransaction],
) -> tuple[int, int]:
    """Ask for a bucket for each transaction and save each choice right away.

    Returns:
        Tuple of (saved, skipped) counts
    """
    click.echo("\nBuckets:")
    for number, category in enumerate(categories, start=1):
        click.echo(f"  {number}. {category.name}")

    saved = 0
    skipped = 0
    for position, txn in enumerate(transactions, start=1):
        click.echo(f"\n[{position}/{len(transactions)}] {_describe(txn)}")
        while True:
            choice = _prompt_bucket(categories)
            if choice == QUIT:
                skipped += len(transactions) - position + 1
                return saved, skipped
            if choice == SKIP:
                skipped += 1
                break
            try:
                run(service.create_transaction(user_id(ctx), txn, category_id=choice.id))
            except DomainError as e:
                click.echo(f"Could not save transaction: {e}. Please try again.", err=True)
                continue
            saved += 1
            click.echo(f"✓ Sorted into '{choice.name}'")
            break

    return saved, skipped


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--categorize/--no-categorize",
    default=False,
    help="Sort each new transaction into a bucket after importing",
)
@click.pass_context
def import_statement(ctx, statement_file: str, categorize: bool):
    """Import a CSV or Excel statement and find transactions not sorted yet."""
    ingest = FileIngestService()

    try:
        processed = ingest.process_file(statement_file)
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)

    if processed.mapping is None:
        for error in processed.errors:
            click.echo(f"Error: {error}", err=True)
        click.echo(f"Columns found: {', '.join(processed.headers)}", err=True)
        ctx.exit(1)

    format_name = ingest.detector.detect_format_name(processed.headers)
    click.echo(f"Detected format: {format_name or 'columns matched by name'}")
    echo_mapping(processed.mapping)
    click.echo(f"\nParsed: {len(processed.transactions)} transactions")
    if processed.errors:
        click.echo(f"  Errors: {len(processed.errors)}")
        for error in processed.errors:
            click.echo(f"    {error}", err=True)

    service = transaction_service(ctx)
    result = run(service.get_uncategorized_transactions(user_id(ctx), processed.transactions))
    click.echo(f"  Already sorted: {result.existing_count}")
    click.echo(f"  New: {result.new_count}")

    if not categorize or not result.new_transactions:
        return

    categories = run(category_service(ctx).ensure_default_categories(user_id(ctx)))
    saved, skipped = sort_into_buckets(ctx, service, categories, result.new_transactions)
    click.echo(f"\nSorting complete: {saved} saved, {skipped} skipped")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
