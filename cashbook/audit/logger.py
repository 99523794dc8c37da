"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every recoverable failure
is logged. This provides:
1. Complete traceability
2. Debugging capability
3. A recent-history view for the user

The audit logger:
- Emits structured log lines through structlog
- Keeps a bounded in-memory trail of recent events
"""

import logging
from collections import deque
from typing import Optional

import structlog

from cashbook.config import AppSettings
from cashbook.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure structlog over the stdlib logging backend.

    Call once at application start-up (create_cashbook does this).
    """
    settings = settings or AppSettings()
    level = "DEBUG" if settings.debug_mode else settings.log_level

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json and not settings.debug_mode
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory trail (for the history view and tests)
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to retain in memory.
        """
        self._events: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("cashbook.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its severity and record it."""
        self._events.append(event)

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._events)
        events.reverse()
        return events[:limit]

    def log_ledger_loaded(self, count: int, schema_version: int) -> None:
        self.log(AuditEventBuilder.ledger_loaded(count, schema_version))

    def log_legacy_migrated(self, backfilled: int, from_version: int) -> None:
        self.log(AuditEventBuilder.legacy_records_migrated(backfilled, from_version))

    def log_transaction_created(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> None:
        """Log a newly recorded transaction."""
        self.log(AuditEventBuilder.transaction_created(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_transaction_updated(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> None:
        """Log an in-place update."""
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_ledger_cleared(self, removed: int) -> None:
        self.log(AuditEventBuilder.ledger_cleared(removed))

    def log_validation_failed(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(issues))

    def log_not_found(self, transaction_id: str, operation: str) -> None:
        self.log(AuditEventBuilder.record_not_found(transaction_id, operation))

    def log_ledger_load_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.ledger_load_failed(key, error_message))

    def log_persistence_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.persistence_failed(key, error_message))

    def log_filter_changed(self, previous: str, current: str) -> None:
        self.log(AuditEventBuilder.filter_changed(previous, current))

    def log_csv_exported(self, filename: str, row_count: int) -> None:
        self.log(AuditEventBuilder.csv_exported(filename, row_count))

    def log_notes_saved(self, length: int) -> None:
        self.log(AuditEventBuilder.notes_saved(length))

    def log_notes_cleared(self) -> None:
        self.log(AuditEventBuilder.notes_cleared())

    def log_division_by_zero(self, dividend: str) -> None:
        self.log(AuditEventBuilder.division_by_zero(dividend))
