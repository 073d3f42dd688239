"""Domain model entities for bucketsort.

These are pure data classes representing business concepts, independent of
the document store layout. Candidate transactions come out of the ingestion
pipeline; persisted transactions and categories come back from the store.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional


RawRow = dict[str, str]


@dataclass(frozen=True)
class ColumnMapping:
    """Column names holding each transaction field in a statement file."""

    date_column: str
    description_column: str
    amount_column: str
    raw_description_column: Optional[str] = None

    def columns(self) -> list[str]:
        """Return all mapped column names, required ones first."""
        cols = [self.date_column, self.description_column, self.amount_column]
        if self.raw_description_column:
            cols.append(self.raw_description_column)
        return cols


@dataclass(frozen=True)
class BankFormat:
    """Known statement layout of a financial institution."""

    key: str
    name: str
    mapping: ColumnMapping


@dataclass(frozen=True)
class CandidateTransaction:
    """Parsed transaction that has not been persisted yet."""

    date: date
    description: str
    amount: Decimal
    raw_description: Optional[str] = None
    original_data: RawRow = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Transaction:
    """Persisted transaction domain entity."""

    id: str
    date: date
    description: str
    amount: Decimal
    category_id: Optional[str]
    created_at: datetime
    updated_at: datetime
    raw_description: Optional[str] = None
    original_data: RawRow = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Category:
    """Bucket a user sorts transactions into."""

    id: str
    name: str
    color: Optional[str]
    is_default: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RowError:
    """Problem with a single statement row.

    ``row_number`` counts lines as a spreadsheet would: the header is row 1,
    so the first data row is row 2.
    """

    row_number: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.message}"


@dataclass
class ConversionResult:
    """Transactions converted from raw rows plus per-row diagnostics."""

    transactions: list[CandidateTransaction] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)


@dataclass
class ProcessedFile:
    """Outcome of ingesting one statement file.

    ``mapping`` is None when the column layout could not be detected; the
    caller then has to ask for a manual mapping. ``errors`` are non-fatal and
    may accompany a non-empty transaction list.
    """

    transactions: list[CandidateTransaction]
    mapping: Optional[ColumnMapping]
    headers: list[str]
    errors: list[str] = field(default_factory=list)
    row_errors: list[RowError] = field(default_factory=list)


@dataclass
class DuplicateCheckResult:
    """Candidates split into new ones and a count of already stored ones."""

    new_transactions: list[CandidateTransaction]
    existing_count: int
    new_count: int


@dataclass(frozen=True)
class PartitionFailure:
    """A year/month partition that could not be read."""

    year: int
    month: int
    message: str


@dataclass
class PartitionScan:
    """Stored transactions gathered across year/month partitions."""

    transactions: list[Transaction] = field(default_factory=list)
    failed_partitions: list[PartitionFailure] = field(default_factory=list)


@dataclass(frozen=True)
class BucketSummary:
    """Aggregated totals of the transactions sorted into one bucket."""

    category_id: Optional[str]
    category_name: str
    color: Optional[str]
    count: int
    total: Decimal
    expenses: Decimal
    income: Decimal
