"""Calculator package."""

from cashbook.calculator.display import format_display, group_thousands
from cashbook.calculator.engine import Calculator, DivisionByZeroError

__all__ = [
    "Calculator",
    "DivisionByZeroError",
    "format_display",
    "group_thousands",
]
