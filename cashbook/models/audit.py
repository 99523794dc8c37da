"""
Audit Models for Cashbook

Every ledger mutation and every recoverable failure is recorded as an
audit event. This provides:
1. Traceability of all changes to the ledger
2. Debugging information when things go wrong
3. A history the user can inspect

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store lifecycle
    LEDGER_LOADED = "ledger_loaded"
    LEGACY_RECORDS_MIGRATED = "legacy_records_migrated"
    LEDGER_LOAD_FAILED = "ledger_load_failed"

    # Mutations
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    LEDGER_CLEARED = "ledger_cleared"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    RECORD_NOT_FOUND = "record_not_found"
    PERSISTENCE_FAILED = "persistence_failed"

    # Views and collaborators
    FILTER_CHANGED = "filter_changed"
    CSV_EXPORTED = "csv_exported"
    NOTES_SAVED = "notes_saved"
    NOTES_CLEARED = "notes_cleared"

    # Calculator
    DIVISION_BY_ZERO = "division_by_zero"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'ledger', 'calculator')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_created(transaction_id, "income", "50")
        event = AuditEventBuilder.persistence_failed("set", error_message)
    """

    @staticmethod
    def ledger_loaded(count: int, schema_version: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            description=f"Loaded {count} transactions",
            details={
                "transaction_count": count,
                "schema_version": schema_version,
            },
        )

    @staticmethod
    def legacy_records_migrated(backfilled: int, from_version: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEGACY_RECORDS_MIGRATED,
            entity_type="ledger",
            description=f"Migrated stored ledger from version {from_version}",
            details={
                "from_version": from_version,
                "time_backfilled": backfilled,
            },
        )

    @staticmethod
    def transaction_created(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Recorded {transaction_type} of {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Updated transaction to {transaction_type} of {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def ledger_cleared(removed: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description=f"All transactions cleared ({removed} removed)",
            details={"removed": removed},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            description=f"Transaction rejected with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def record_not_found(transaction_id: str, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Cannot {operation}: no transaction with this id",
            details={"operation": operation},
        )

    @staticmethod
    def ledger_load_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Stored ledger under '{key}' could not be loaded",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def persistence_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Failed to write '{key}' to the backing store",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def filter_changed(previous: str, current: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTER_CHANGED,
            severity=AuditSeverity.DEBUG,
            entity_type="view",
            description=f"Filter changed to {current}",
            details={"previous": previous, "current": current},
            is_user_action=True,
        )

    @staticmethod
    def csv_exported(filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            entity_type="export",
            description=f"Exported {row_count} transactions to {filename}",
            details={"filename": filename, "row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def notes_saved(length: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTES_SAVED,
            entity_type="notes",
            description="Notes saved",
            details={"length": length},
            is_user_action=True,
        )

    @staticmethod
    def notes_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTES_CLEARED,
            entity_type="notes",
            description="Notes cleared",
            is_user_action=True,
        )

    @staticmethod
    def division_by_zero(dividend: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DIVISION_BY_ZERO,
            severity=AuditSeverity.WARNING,
            entity_type="calculator",
            description="Cannot divide by zero; calculator reset",
            details={"dividend": dividend},
            is_user_action=True,
        )
