"""Statement file ingestion service."""

import csv
from pathlib import Path
from typing import Optional, TextIO

import pandas as pd

from bucketsort.domain.entities import ColumnMapping, ProcessedFile, RawRow
from bucketsort.domain.errors import (
    NoMappingDetectedError,
    UnsupportedFormatError,
    ValidationError,
    empty_statement,
    missing_mapped_columns,
    no_mapping_detected,
    unsupported_format,
)
from bucketsort.domain.formats import FormatDetector
from bucketsort.domain.row_converter import FIRST_DATA_ROW, convert_rows
from bucketsort.logging_setup import get_logger

logger = get_logger(__name__)

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xls"}
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | EXCEL_EXTENSIONS


def _file_kind(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in CSV_EXTENSIONS:
        return "CSV"
    if suffix in EXCEL_EXTENSIONS:
        return "Excel"
    raise UnsupportedFormatError(unsupported_format(path.name))


def _is_blank(row: RawRow) -> bool:
    return not any(value and str(value).strip() for value in row.values())


class FileIngestService:
    """Service for turning statement files into candidate transactions."""

    def __init__(self, detector: Optional[FormatDetector] = None):
        """Initialize file ingest service.

        Args:
            detector: Format detector, defaults to one using the built-in catalog
        """
        self.detector = detector or FormatDetector()

    def read_rows(self, file_path: str) -> tuple[list[str], list[RawRow], list[str]]:
        """Read the header row and data rows of a statement file.

        Args:
            file_path: Path to a .csv, .xlsx or .xls file

        Returns:
            Tuple of (headers, rows, parse warnings); fully blank rows are dropped

        Raises:
            UnsupportedFormatError: If the extension is not supported
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file cannot be parsed
        """
        path = Path(file_path)
        kind = _file_kind(path)
        if not path.exists():
            raise FileNotFoundError(f"Statement file not found: {file_path}")

        if kind == "CSV":
            return self._read_csv(path)
        return self._read_excel(path)

    def _read_csv(self, path: Path) -> tuple[list[str], list[RawRow], list[str]]:
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                return self._parse_csv(f)
        except (UnicodeDecodeError, csv.Error) as e:
            raise ValidationError(f"CSV parsing failed: {e}") from e

    @staticmethod
    def _parse_csv(f: TextIO) -> tuple[list[str], list[RawRow], list[str]]:
        # Try to detect delimiter
        sample = f.read(1024)
        f.seek(0)
        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=",;\t|")
        except csv.Error:
            dialect = csv.excel

        reader = csv.DictReader(f, dialect=dialect)
        headers = [h.strip() for h in (reader.fieldnames or [])]
        reader.fieldnames = headers

        warnings: list[str] = []
        rows: list[RawRow] = []
        for row in reader:
            extra = row.pop(None, None)
            clean = {key: (value if value is not None else "") for key, value in row.items()}
            if _is_blank(clean) and not extra:
                continue
            # Numbered like the row converter: kept data rows after the header
            if extra:
                row_number = FIRST_DATA_ROW + len(rows)
                warnings.append(f"Row {row_number}: Too many fields, extra values ignored")
            rows.append(clean)

        return headers, rows, warnings

    def _read_excel(self, path: Path) -> tuple[list[str], list[RawRow], list[str]]:
        try:
            df = pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False)
        except Exception as e:
            raise ValidationError(f"Excel parsing failed: {e}") from e

        headers = [str(column).strip() for column in df.columns]
        df.columns = headers
        rows = [
            {key: ("" if value is None else str(value)) for key, value in record.items()}
            for record in df.to_dict(orient="records")
        ]
        return headers, [row for row in rows if not _is_blank(row)], []

    def process_file(self, file_path: str) -> ProcessedFile:
        """Parse a statement file into candidate transactions.

        The extension is checked before anything is read. When the column
        layout cannot be detected the result carries no transactions and a
        None mapping, so the caller can ask for a manual mapping.

        Args:
            file_path: Path to a .csv, .xlsx or .xls file

        Returns:
            ProcessedFile with transactions, mapping, headers and diagnostics

        Raises:
            UnsupportedFormatError: If the extension is not supported
            FileNotFoundError: If the file doesn't exist
            ValidationError: If the file cannot be parsed or has no data rows
        """
        kind = _file_kind(Path(file_path))
        headers, rows, warnings = self.read_rows(file_path)
        if not rows:
            raise ValidationError(empty_statement(kind))

        mapping = self.detector.detect(headers)
        if mapping is None:
            logger.info("No column mapping detected for %s (headers: %s)", file_path, headers)
            return ProcessedFile(
                transactions=[],
                mapping=None,
                headers=headers,
                errors=warnings + [no_mapping_detected(kind)],
            )

        return self._convert(rows, mapping, headers, warnings)

    def process_file_with_mapping(self, file_path: str, mapping: ColumnMapping) -> ProcessedFile:
        """Parse a statement file using a column mapping chosen by the user.

        Raises:
            NoMappingDetectedError: If a mapped column is not in the file
        """
        kind = _file_kind(Path(file_path))
        headers, rows, warnings = self.read_rows(file_path)
        missing = [column for column in mapping.columns() if column not in headers]
        if missing:
            raise NoMappingDetectedError(missing_mapped_columns(missing))
        if not rows:
            raise ValidationError(empty_statement(kind))

        return self._convert(rows, mapping, headers, warnings)

    def _convert(
        self, rows: list[RawRow], mapping: ColumnMapping, headers: list[str], warnings: list[str]
    ) -> ProcessedFile:
        result = convert_rows(rows, mapping)
        logger.info(
            "Parsed %d transactions from %d rows (%d row errors)",
            len(result.transactions),
            len(rows),
            len(result.errors),
        )
        return ProcessedFile(
            transactions=result.transactions,
            mapping=mapping,
            headers=headers,
            errors=warnings + [str(error) for error in result.errors],
            row_errors=result.errors,
        )


def process_file(file_path: str) -> ProcessedFile:
    """Parse a statement file using the default format catalog."""
    return FileIngestService().process_file(file_path)
