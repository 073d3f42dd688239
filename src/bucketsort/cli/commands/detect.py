"""Statement layout detection command."""

import click

from bucketsort.cli.commands.import_cmd import echo_mapping
from bucketsort.cli.error_handling import handle_domain_error
from bucketsort.domain.errors import DomainError
from bucketsort.domain.ingest import FileIngestService


@click.command("detect")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def detect_columns(ctx, statement_file: str):
    """Show the columns of a statement and how they would be mapped."""
    ingest = FileIngestService()

    try:
        headers, rows, _ = ingest.read_rows(statement_file)
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Columns: {', '.join(headers)}")
    click.echo(f"Rows: {len(rows)}")

    mapping = ingest.detector.detect(headers)
    if mapping is None:
        click.echo("No column mapping detected. Columns must be mapped manually.")
        ctx.exit(1)

    format_name = ingest.detector.detect_format_name(headers)
    click.echo(f"Detected format: {format_name or 'columns matched by name'}")
    echo_mapping(mapping)


def register_commands(cli):
    """Register detect command with main CLI."""
    cli.add_command(detect_columns)
