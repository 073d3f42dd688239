"""Mapper functions to convert between domain entities and store documents.

This layer isolates the document field names (camelCase, as other clients of
the same store expect) from the domain model.
"""

from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from bucketsort.database.base import SERVER_TIMESTAMP, Document
from bucketsort.domain import entities as domain


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    # Documents written without timestamps fall back to the read time
    return datetime.now(UTC)


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Stored transaction has no usable date: {value!r}")


def _as_decimal(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Stored transaction has no usable amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Stored transaction has no usable amount: {value!r}")
    return amount


def transaction_to_document(
    candidate: domain.CandidateTransaction, category_id: Optional[str]
) -> dict[str, Any]:
    """Build the document data written for a newly categorized transaction."""
    return {
        "date": candidate.date,
        "description": candidate.description,
        "amount": candidate.amount,
        "categoryId": category_id,
        "rawDescription": candidate.raw_description,
        "originalData": dict(candidate.original_data),
        "createdAt": SERVER_TIMESTAMP,
        "updatedAt": SERVER_TIMESTAMP,
    }


def document_to_transaction(document: Document) -> domain.Transaction:
    """Convert a stored transaction document to a Transaction entity."""
    data = document.data
    return domain.Transaction(
        id=document.id,
        date=_as_date(data.get("date")),
        description=data.get("description") or "",
        amount=_as_decimal(data.get("amount", 0)),
        category_id=data.get("categoryId"),
        created_at=_as_datetime(data.get("createdAt")),
        updated_at=_as_datetime(data.get("updatedAt")),
        raw_description=data.get("rawDescription"),
        original_data=dict(data.get("originalData") or {}),
    )


def category_to_document(
    name: str, color: Optional[str], is_default: bool
) -> dict[str, Any]:
    """Build the document data written for a new category."""
    return {
        "name": name,
        "color": color,
        "isDefault": is_default,
        "createdAt": SERVER_TIMESTAMP,
        "updatedAt": SERVER_TIMESTAMP,
    }


def document_to_category(document: Document) -> domain.Category:
    """Convert a stored category document to a Category entity."""
    data = document.data
    return domain.Category(
        id=document.id,
        name=data.get("name", ""),
        color=data.get("color"),
        is_default=bool(data.get("isDefault", False)),
        created_at=_as_datetime(data.get("createdAt")),
        updated_at=_as_datetime(data.get("updatedAt")),
    )
