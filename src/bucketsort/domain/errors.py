"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or document does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class UnsupportedFormatError(ValidationError):
    """Statement file has an extension the importer cannot read."""


class NoMappingDetectedError(DomainError):
    """No column mapping could be determined for a statement file."""


class NormalizationError(ValidationError):
    """A raw cell value could not be normalized."""


class MalformedDateError(NormalizationError):
    """Date text could not be parsed."""


class MalformedAmountError(NormalizationError):
    """Amount text could not be parsed."""


class InvalidDateError(DomainError):
    """A transaction identifier was requested for an invalid date."""


class StoreError(DomainError):
    """The document store failed to serve a request."""


def unsupported_format(filename: str) -> str:
    """Return message for a statement file with an unsupported extension."""
    return (
        f"Unsupported file format for '{filename}'. "
        "Please upload a CSV (.csv) or Excel (.xlsx, .xls) file."
    )


def no_mapping_detected(kind: str) -> str:
    """Return message when the column layout could not be detected."""
    return f"Could not automatically detect {kind} format. Please map columns manually."


def missing_mapped_columns(columns: list[str]) -> str:
    """Return message when a column mapping references absent headers."""
    return f"Column mapping references missing columns: {', '.join(columns)}"


def empty_statement(kind: str) -> str:
    """Return message for a statement file without data rows."""
    return f"{kind} file contains no data"


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def duplicate_category_name(name: str) -> str:
    """Return message for a category name that is already in use."""
    return f"Category with name '{name}' already exists"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def document_not_found(path: str) -> str:
    """Return message for a missing store document."""
    return f"Document '{path}' not found"
