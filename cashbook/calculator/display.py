"""Display formatting for the calculator screen."""

import re


_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")


def group_thousands(digits: str) -> str:
    """Insert commas every three digits from the right: '1234567' -> '1,234,567'."""
    return _THOUSANDS.sub(",", digits)


def format_display(text: str) -> str:
    """Group the integer part only; the decimal part passes through unchanged."""
    integer, point, fraction = text.partition(".")
    return group_thousands(integer) + point + fraction
