"""Deterministic transaction identifiers.

A transaction's identifier is derived from its calendar date, description and
amount, so the same statement line always maps to the same storage key. It
doubles as the deduplication key: two lines on the same day with the same
description and amount are the same transaction.

The digest is 64-bit BLAKE2b rendered in base 36 (at most 13 characters).
It is not meant to resist deliberate collisions, but accidental collisions
between a user's transactions are negligible at that width.
"""

import hashlib
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Union

from bucketsort.domain.errors import InvalidDateError, ValidationError

FIELD_SEPARATOR = "|"
DIGEST_SIZE = 8

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def calendar_date(value: Union[date, datetime]) -> date:
    """Return the calendar date of a date or datetime.

    Raises:
        InvalidDateError: If value is not a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidDateError(f"Invalid date provided for transaction ID generation: {value!r}")


def canonical_amount(amount: Union[Decimal, int, float, str]) -> str:
    """Render an amount so equal values always produce the same text.

    "-4.50", "-4.5" and -4.5 all render as "-4.5"; zero renders as "0".
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount for transaction ID generation: {amount!r}")
    if not value.is_finite():
        raise ValidationError(f"Invalid amount for transaction ID generation: {amount!r}")
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def transaction_key(txn_date: Union[date, datetime], description: str, amount) -> str:
    """Build the text an identifier is derived from."""
    day = calendar_date(txn_date)
    return FIELD_SEPARATOR.join((day.isoformat(), description, canonical_amount(amount)))


def derive_transaction_id(txn_date: Union[date, datetime], description: str, amount) -> str:
    """Derive the storage and deduplication key of a transaction.

    Args:
        txn_date: Transaction date; only the calendar day is used
        description: Normalized description
        amount: Signed amount

    Returns:
        Base-36 identifier

    Raises:
        InvalidDateError: If txn_date is not a valid date
    """
    key = transaction_key(txn_date, description, amount)
    digest = hashlib.blake2b(key.encode("utf-8"), digest_size=DIGEST_SIZE).digest()
    return _to_base36(int.from_bytes(digest, "big"))
