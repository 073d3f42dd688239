"""Conversion of raw statement rows into candidate transactions."""

from typing import Iterable

from bucketsort.domain.entities import (
    CandidateTransaction,
    ColumnMapping,
    ConversionResult,
    RawRow,
    RowError,
)
from bucketsort.domain.errors import NormalizationError
from bucketsort.logging_setup import get_logger
from bucketsort.utils.amount_parser import parse_amount
from bucketsort.utils.date_parser import parse_date

logger = get_logger(__name__)

MISSING_REQUIRED_DATA = "Missing required data"

# Data rows are numbered after the header line (row 1)
FIRST_DATA_ROW = 2


def _cell(row: RawRow, column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value)


def convert_rows(rows: Iterable[RawRow], mapping: ColumnMapping) -> ConversionResult:
    """Convert raw rows into candidate transactions.

    Rows missing a date, description or amount, and rows whose date or amount
    cannot be normalized, are reported in ``errors`` and skipped; the rest of
    the batch is still converted.

    Args:
        rows: Parsed statement rows keyed by column name
        mapping: Column mapping detected for the file

    Returns:
        ConversionResult with transactions in input order and row errors
    """
    result = ConversionResult()

    for row_number, row in enumerate(rows, start=FIRST_DATA_ROW):
        date_str = _cell(row, mapping.date_column)
        description = _cell(row, mapping.description_column)
        amount_str = _cell(row, mapping.amount_column)

        if not date_str.strip() or not description.strip() or not amount_str.strip():
            result.errors.append(RowError(row_number, MISSING_REQUIRED_DATA))
            continue

        try:
            txn_date = parse_date(date_str)
            amount = parse_amount(amount_str)
        except NormalizationError as e:
            result.errors.append(RowError(row_number, str(e)))
            continue

        raw_description = None
        if mapping.raw_description_column:
            raw_description = row.get(mapping.raw_description_column)

        result.transactions.append(
            CandidateTransaction(
                date=txn_date,
                description=description.strip(),
                amount=amount,
                raw_description=raw_description,
                original_data=dict(row),
            )
        )

    logger.debug(
        "Converted %d rows with %d errors", len(result.transactions), len(result.errors)
    )
    return result
