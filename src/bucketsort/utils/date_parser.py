"""Date parsing utilities."""

import re
from datetime import date
from dateutil import parser as date_parser

from bucketsort.domain.errors import MalformedDateError

_MONTH_DAY_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def parse_date(date_str: str) -> date:
    """Parse a statement date string into a date object.

    Handles the shapes banks export:
    - ISO dates and date-times: "2024-03-15", "2024-03-15 00:00:00"
    - Month first with slashes: "03/15/2024", "3/15/2024"
    - Textual dates: "March 15, 2024", "15 Mar 2024"

    Only the calendar fields are kept; no timezone conversion is applied.

    Args:
        date_str: Date string in one of the supported formats

    Returns:
        Date object

    Raises:
        MalformedDateError: If the string cannot be parsed as a date
    """
    if date_str is None or not str(date_str).strip():
        raise MalformedDateError("Invalid date format: empty value")

    text = str(date_str).strip()

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError):
        pass

    # Explicit M/D/YYYY fallback
    match = _MONTH_DAY_YEAR.match(text)
    if match:
        month, day, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            pass

    raise MalformedDateError(f"Invalid date format: {text}")
