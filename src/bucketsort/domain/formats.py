"""Statement format catalog and column layout detection."""

import re
from typing import Optional, Sequence

from bucketsort.domain.entities import BankFormat, ColumnMapping

# Minimum score for a catalog entry; acceptance also needs every required column.
ACCEPT_SCORE = 6
REQUIRED_COLUMN_POINTS = 3
RAW_DESCRIPTION_POINTS = 1

DATE_COLUMN_PATTERN = re.compile(r"date|posted|transaction.*date", re.IGNORECASE)
DESCRIPTION_COLUMN_PATTERN = re.compile(r"description|merchant|payee|details|name", re.IGNORECASE)
DESCRIPTION_EXCLUDE_PATTERN = re.compile(r"original", re.IGNORECASE)
AMOUNT_COLUMN_PATTERN = re.compile(
    r"amount|debit|credit|withdrawal|deposit|charge", re.IGNORECASE
)


def _bank(key: str, name: str, date_col: str, desc_col: str, amount_col: str,
          raw_col: Optional[str] = None) -> BankFormat:
    return BankFormat(
        key=key,
        name=name,
        mapping=ColumnMapping(
            date_column=date_col,
            description_column=desc_col,
            amount_column=amount_col,
            raw_description_column=raw_col,
        ),
    )


# Order matters: among equally scored entries the first listed wins.
DEFAULT_FORMAT_CATALOG: tuple[BankFormat, ...] = (
    _bank("chase", "Chase Bank", "Transaction Date", "Description", "Amount"),
    _bank("bank_of_america", "Bank of America", "Date", "Description", "Amount"),
    _bank("citibank", "Citibank", "Date", "Description", "Debit"),
    _bank("wells_fargo", "Wells Fargo", "Date", "Description", "Amount"),
    _bank("capital_one", "Capital One", "Transaction Date", "Description", "Transaction Amount"),
    _bank("amex", "American Express", "Date", "Description", "Amount"),
    _bank("us_bank", "US Bank", "Date", "Description", "Amount"),
    _bank("pnc", "PNC Bank", "Date", "Description", "Withdrawals"),
    _bank("td_bank", "TD Bank", "Date", "Description", "Amount"),
    _bank("monarch", "Monarch/Generic", "Date", "Merchant", "Amount", "Original Statement"),
    _bank("generic", "Generic CSV", "Date", "Description", "Amount"),
)


class FormatDetector:
    """Detects which columns of a statement hold date, description and amount.

    The catalog is injected so callers can add institution layouts without
    touching module state.
    """

    def __init__(self, catalog: Sequence[BankFormat] = DEFAULT_FORMAT_CATALOG):
        """Initialize format detector.

        Args:
            catalog: Known statement layouts, in tie-break order
        """
        self.catalog = tuple(catalog)

    @staticmethod
    def score(fmt: BankFormat, headers: Sequence[str]) -> int:
        """Score how well a catalog entry matches a header row.

        Args:
            fmt: Catalog entry
            headers: Column names from the file

        Returns:
            3 points per matched required column plus 1 for a matched
            raw description column
        """
        lower_headers = {h.lower() for h in headers}
        mapping = fmt.mapping

        score = 0
        for column in (mapping.date_column, mapping.description_column, mapping.amount_column):
            if column.lower() in lower_headers:
                score += REQUIRED_COLUMN_POINTS
        if mapping.raw_description_column and mapping.raw_description_column.lower() in lower_headers:
            score += RAW_DESCRIPTION_POINTS
        return score

    @staticmethod
    def has_required_columns(fmt: BankFormat, headers: Sequence[str]) -> bool:
        """Return True if the date, description and amount columns all exist."""
        lower_headers = {h.lower() for h in headers}
        mapping = fmt.mapping
        return all(
            column.lower() in lower_headers
            for column in (mapping.date_column, mapping.description_column, mapping.amount_column)
        )

    def best_match(self, headers: Sequence[str]) -> Optional[BankFormat]:
        """Return the accepted catalog entry for a header row, if any.

        Only entries whose three required columns all exist are accepted,
        since a score of 6 can also come from just two of them.
        """
        best: Optional[BankFormat] = None
        best_score = -1
        for fmt in self.catalog:
            if not self.has_required_columns(fmt, headers):
                continue
            score = self.score(fmt, headers)
            # Strictly greater keeps the first listed entry on ties
            if score > best_score:
                best, best_score = fmt, score

        if best is None or best_score < ACCEPT_SCORE:
            return None
        return best

    def detect(self, headers: Sequence[str]) -> Optional[ColumnMapping]:
        """Detect the column mapping of a statement file.

        Catalog entries are tried first; when none matches all required
        columns, each header is classified by regular expressions and the
        first candidate for every role is used.

        Args:
            headers: Column names from the file, in file order

        Returns:
            ColumnMapping using the file's own header spelling, or None when
            no mapping could be found
        """
        headers = [h for h in headers if h is not None]

        fmt = self.best_match(headers)
        if fmt is not None:
            mapping = fmt.mapping
            raw_column = None
            if mapping.raw_description_column:
                raw_column = _find_header(headers, mapping.raw_description_column)
            return ColumnMapping(
                date_column=_find_header(headers, mapping.date_column) or mapping.date_column,
                description_column=(
                    _find_header(headers, mapping.description_column) or mapping.description_column
                ),
                amount_column=_find_header(headers, mapping.amount_column) or mapping.amount_column,
                raw_description_column=raw_column,
            )

        return self._fuzzy_detect(headers)

    def detect_format_name(self, headers: Sequence[str]) -> Optional[str]:
        """Return the institution name of the accepted catalog entry, if any."""
        fmt = self.best_match(headers)
        return fmt.name if fmt is not None else None

    @staticmethod
    def _fuzzy_detect(headers: Sequence[str]) -> Optional[ColumnMapping]:
        date_columns = [h for h in headers if DATE_COLUMN_PATTERN.search(h)]
        description_columns = [
            h
            for h in headers
            if DESCRIPTION_COLUMN_PATTERN.search(h) and not DESCRIPTION_EXCLUDE_PATTERN.search(h)
        ]
        amount_columns = [h for h in headers if AMOUNT_COLUMN_PATTERN.search(h)]

        if not (date_columns and description_columns and amount_columns):
            return None

        return ColumnMapping(
            date_column=date_columns[0],
            description_column=description_columns[0],
            amount_column=amount_columns[0],
        )


def _find_header(headers: Sequence[str], column: str) -> Optional[str]:
    wanted = column.lower()
    for header in headers:
        if header.lower() == wanted:
            return header
    return None


def detect_format(headers: Sequence[str]) -> Optional[ColumnMapping]:
    """Detect a column mapping using the default catalog."""
    return FormatDetector().detect(headers)
