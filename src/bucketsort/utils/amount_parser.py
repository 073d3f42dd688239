"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from bucketsort.domain.errors import MalformedAmountError

_STRIPPED_CHARACTERS = re.compile(r"[$€£¥,\s]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses, accounting style)
    - "" (blank cells count as zero)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        MalformedAmountError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        return Decimal("0")

    # Remove currency symbols, thousands separators and whitespace
    cleaned = _STRIPPED_CHARACTERS.sub("", str(amount_str))

    # Handle parentheses notation (negative)
    is_negative = "(" in cleaned and ")" in cleaned
    number_str = cleaned.replace("(", "").replace(")", "")

    try:
        amount = Decimal(number_str)
    except InvalidOperation:
        raise MalformedAmountError(f"Invalid amount format: {amount_str}")

    if not amount.is_finite():
        raise MalformedAmountError(f"Invalid amount format: {amount_str}")

    if is_negative:
        return -abs(amount)
    return amount
