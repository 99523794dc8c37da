"""Validation package."""

from cashbook.validation.validator import (
    TransactionValidator,
    ValidationError,
    parse_decimal,
)

__all__ = ["TransactionValidator", "ValidationError", "parse_decimal"]
