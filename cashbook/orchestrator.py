"""
Main Orchestrator for Cashbook

This module ties together all the components and defines the
end-to-end flow:

    form input → Calculator (optional) → TransactionStore mutation
    → FilterEngine re-derives the view → SummaryEngine recomputes totals

DESIGN DECISION: CashBook owns the UI-facing state (active filter,
edit in progress, calculator) but never touches presentation. A
rendering layer calls into it and draws whatever it returns.
"""

import datetime as dt
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any, Optional, Union

from cashbook.audit import AuditLogger, configure_logging
from cashbook.calculator import Calculator
from cashbook.config import Settings, get_settings
from cashbook.models.transaction import (
    FilterKind,
    Summary,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from cashbook.queries import filter_transactions, sort_for_display, summary_for
from cashbook.services.export import (
    CsvExport,
    all_rows,
    default_export_range,
    export_rows,
    full_filename,
    range_filename,
    render_csv,
)
from cashbook.services.ledger import TransactionStore
from cashbook.services.notes import NotesStore
from cashbook.services.storage import (
    InMemoryKeyValueStore,
    KeyValueStore,
    LocalFileKeyValueStore,
    NotFoundError,
)
from cashbook.validation import TransactionValidator, ValidationError


class CashBook:
    """
    Application facade over the ledger engine.

    Flow for a form submission:
    1. Optional: use_calculator_result() fills the amount
    2. submit() creates, or updates the record being edited
    3. visible_transactions() / summary() re-derive the view
    """

    def __init__(
        self,
        store: TransactionStore,
        notes: Optional[NotesStore] = None,
        calculator: Optional[Calculator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
    ):
        self._store = store
        self._notes = notes
        self._calculator = calculator or Calculator(audit_logger=audit_logger)
        self._audit_logger = audit_logger
        self._clock = clock

        self._current_filter = FilterKind.ALL
        self._editing_id: Optional[str] = None

    @property
    def store(self) -> TransactionStore:
        return self._store

    @property
    def notes(self) -> Optional[NotesStore]:
        return self._notes

    @property
    def calculator(self) -> Calculator:
        return self._calculator

    # -------------------------------------------------------------------------
    # Filter
    # -------------------------------------------------------------------------

    @property
    def current_filter(self) -> FilterKind:
        return self._current_filter

    def set_filter(self, kind: Union[FilterKind, str]) -> FilterKind:
        """
        Make `kind` the active selector.

        Raises:
            ValueError: If `kind` is not a known filter
        """
        kind = FilterKind(kind)
        previous = self._current_filter
        self._current_filter = kind

        if self._audit_logger and previous != kind:
            self._audit_logger.log_filter_changed(previous.value, kind.value)

        return kind

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    @property
    def editing_id(self) -> Optional[str]:
        return self._editing_id

    def begin_edit(self, transaction_id: str) -> TransactionDraft:
        """
        Start editing a record; the next submit() updates it.

        Returns:
            A draft pre-filled from the record (magnitude, type from sign)

        Raises:
            NotFoundError: If no record has this id
        """
        transaction = self._store.get(transaction_id)
        self._editing_id = transaction.id

        return TransactionDraft(
            description=transaction.description,
            amount=transaction.magnitude,
            type=TransactionType.for_amount(transaction.amount).value,
            date=transaction.date,
            time=transaction.time,
        )

    def cancel_edit(self) -> None:
        self._editing_id = None

    def submit(self, fields: Union[TransactionDraft, Mapping[str, Any]]) -> Transaction:
        """
        Save the form: update when an edit is in progress, create otherwise.

        On ValidationError the edit stays in progress so the user can fix
        the form. If the edited record has vanished, the edit is dropped
        and NotFoundError propagates.
        """
        if self._editing_id is None:
            return self._store.create(fields)

        try:
            transaction = self._store.update(self._editing_id, fields)
        except NotFoundError:
            self._editing_id = None
            raise

        self._editing_id = None
        return transaction

    def delete(self, transaction_id: str) -> Transaction:
        removed = self._store.delete(transaction_id)
        if self._editing_id == transaction_id:
            self._editing_id = None
        return removed

    def clear_all(self) -> int:
        """Remove every transaction. Returns how many were removed."""
        self._editing_id = None
        return self._store.clear()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def visible_transactions(self, reference: Optional[dt.datetime] = None) -> list[Transaction]:
        """Records for the active filter, newest first."""
        reference = reference or self._clock()
        selected = filter_transactions(self._store.list(), self._current_filter, reference)
        return sort_for_display(selected)

    def summary(self, reference: Optional[dt.datetime] = None) -> Summary:
        """Totals for the active filter (whole ledger unless a time window is active)."""
        reference = reference or self._clock()
        return summary_for(self._store.list(), self._current_filter, reference)

    # -------------------------------------------------------------------------
    # Calculator hand-off
    # -------------------------------------------------------------------------

    def use_calculator_result(self) -> Decimal:
        """
        The calculator's current value, for the form's amount field.

        Raises:
            ValidationError: If the value is not a positive amount
        """
        value = self._calculator.value
        if value is None or value <= 0:
            raise self._rejected(ValidationError.single(
                field="amount",
                issue_type="invalid_value",
                message="Please calculate a valid amount first",
                suggested_fix="The result must be greater than zero",
            ))
        return value

    def _rejected(self, error: ValidationError) -> ValidationError:
        if self._audit_logger:
            self._audit_logger.log_validation_failed(
                [issue.model_dump() for issue in error.issues]
            )
        return error

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def default_export_range(self) -> tuple[dt.date, dt.date]:
        return default_export_range(self._clock())

    def export_csv(self, start_date: dt.date, end_date: dt.date) -> CsvExport:
        """
        Export transactions dated within [start_date, end_date].

        Raises:
            ValidationError: If start_date is after end_date
        """
        try:
            rows = export_rows(self._store.list(), start_date, end_date)
        except ValidationError as e:
            self._rejected(e)
            raise
        export = CsvExport(
            filename=range_filename(start_date, end_date),
            content=render_csv(rows),
            row_count=len(rows),
        )

        if self._audit_logger:
            self._audit_logger.log_csv_exported(export.filename, export.row_count)

        return export

    def export_all_csv(self) -> CsvExport:
        rows = all_rows(self._store.list())
        export = CsvExport(
            filename=full_filename(self._clock().date()),
            content=render_csv(rows),
            row_count=len(rows),
        )

        if self._audit_logger:
            self._audit_logger.log_csv_exported(export.filename, export.row_count)

        return export


def create_backend(settings: Settings) -> KeyValueStore:
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore()
    return LocalFileKeyValueStore(storage_settings.data_dir)


def create_cashbook(
    settings: Optional[Settings] = None,
    backend: Optional[KeyValueStore] = None,
    clock: Callable[[], dt.datetime] = dt.datetime.now,
) -> CashBook:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration (the cached settings if None)
        backend: Backing store to use instead of the configured one
        clock: Source of "now" for time windows and export defaults

    Returns:
        A ready CashBook with its store loaded
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings)
    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)

    if backend is None:
        backend = create_backend(settings)

    store = TransactionStore(
        backend,
        key=storage_settings.transactions_key,
        validator=TransactionValidator(today=lambda: clock().date()),
        audit_logger=audit_logger,
    )
    notes = NotesStore(
        backend,
        key=storage_settings.notes_key,
        audit_logger=audit_logger,
    )
    calculator = Calculator.from_settings(settings.calculator, audit_logger=audit_logger)

    return CashBook(
        store,
        notes=notes,
        calculator=calculator,
        audit_logger=audit_logger,
        clock=clock,
    )
