"""
Data Models Package

This package contains all Pydantic models used in Cashbook.
All data flowing through the system must conform to these schemas.
"""

from cashbook.models.transaction import (
    DEFAULT_TIME,
    FilterKind,
    Summary,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from cashbook.models.calculator import (
    CalculatorState,
    Operation,
)
from cashbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_TIME",
    "FilterKind",
    "Summary",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Calculator models
    "CalculatorState",
    "Operation",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
