"""Utility functions for bucketsort."""

from bucketsort.utils.date_parser import parse_date
from bucketsort.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
