"""
Core Data Models for Cashbook

These models define the strict schemas for ledger data.
They are designed to:
1. Enforce the ledger invariants at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: A Transaction can only be constructed in a consistent
state (non-zero amount whose sign agrees with its type). Raw form input
lives in TransactionDraft until the validator has checked it.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


DEFAULT_TIME = "00:00"

# HH:MM, optionally with seconds (what an HTML time input produces)
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction. Always agrees with the amount's sign."""
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def for_amount(cls, amount: Decimal) -> "TransactionType":
        return cls.INCOME if amount > 0 else cls.EXPENSE


class FilterKind(str, Enum):
    """
    Selectors for the transaction view.

    Type filters (income/expense) and time windows are mutually
    exclusive: exactly one selector is active at a time.
    """
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def is_time_window(self) -> bool:
        return self in TIME_WINDOW_FILTERS


TIME_WINDOW_FILTERS = frozenset({
    FilterKind.DAILY,
    FilterKind.WEEKLY,
    FilterKind.MONTHLY,
    FilterKind.YEARLY,
})


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A recorded ledger entry.

    Income is stored with a positive amount, expense with a negative one.
    Instances are frozen; the store replaces a record wholesale on update.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, stable for the record's lifetime"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )
    amount: Decimal = Field(
        ...,
        description="Signed amount: positive = income, negative = expense"
    )
    type: TransactionType
    date: dt.date = Field(
        ...,
        description="Calendar date the transaction is attributed to"
    )
    time: str = Field(
        default=DEFAULT_TIME,
        pattern=TIME_PATTERN,
        description="Clock time, used only for ordering within a day"
    )

    @model_validator(mode='after')
    def validate_direction(self) -> 'Transaction':
        """Amount must be non-zero and agree with the type."""
        if self.amount == 0:
            raise ValueError("Amount cannot be zero")

        if (self.type == TransactionType.INCOME) != (self.amount > 0):
            raise ValueError("Transaction type does not match the sign of the amount")

        return self

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def magnitude(self) -> Decimal:
        """Absolute amount, as shown to the user and exported."""
        return abs(self.amount)


class TransactionDraft(BaseModel):
    """
    Unverified transaction input, as typed into the form.

    CRITICAL: This is PROPOSED data, NOT verified.
    It must pass TransactionValidator before it becomes a Transaction.
    The amount is the magnitude; its sign comes from `type`.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = ""
    amount: Optional[Union[Decimal, int, float, str]] = None
    type: Optional[str] = None
    date: Optional[Union[dt.date, str]] = None
    time: Optional[str] = None


class Summary(BaseModel):
    """Aggregate totals over a set of transactions."""

    total_income: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Sum of all positive amounts"
    )
    total_expense: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Sum of the absolute values of all negative amounts"
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        description="total_income - total_expense"
    )
    transaction_count: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def validate_balance(self) -> 'Summary':
        if self.balance != self.total_income - self.total_expense:
            raise ValueError("Balance must equal income minus expense")
        return self


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a TransactionDraft.

    When valid, `values` holds the normalized fields (signed amount,
    parsed date, defaulted time) ready to build a Transaction.
    """

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )
    values: dict[str, Any] = Field(
        default_factory=dict,
        description="Normalized field values (only populated when valid)"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
