"""
Transaction Store

DESIGN DECISION: The store is the sole owner of transaction records.
No other component mutates them. Every mutation:
1. Validates input (no state change on failure)
2. Applies the change in memory
3. Serializes the whole collection to the backing store

If step 3 fails, the in-memory change is kept and PersistenceError is
raised, so the current session never silently loses an edit.
"""

import json
import time
from collections.abc import Callable, Collection, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from cashbook.audit import AuditLogger
from cashbook.models.transaction import Transaction, TransactionDraft
from cashbook.services.ledger.migrations import SCHEMA_VERSION, load_records
from cashbook.services.storage.interface import (
    CorruptDataError,
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from cashbook.validation import TransactionValidator, ValidationError


DEFAULT_TRANSACTIONS_KEY = "cashbook_transactions"

Fields = Union[TransactionDraft, Mapping[str, Any]]


class TimestampIdFactory:
    """
    Millisecond-timestamp ids, as strings.

    Ids are strictly increasing within a process and skip any id
    already present in the collection.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self, existing: Collection[str]) -> str:
        candidate = max(int(self._clock() * 1000), self._last + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last = candidate
        return str(candidate)


class TransactionStore:
    """
    Ordered, persisted collection of transactions.

    Records are kept in insertion order; callers sort for display.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = DEFAULT_TRANSACTIONS_KEY,
        validator: Optional[TransactionValidator] = None,
        id_factory: Optional[Callable[[Collection[str]], str]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the store and load the persisted collection.

        Args:
            backend: Key-value port holding the serialized ledger
            key: Key under which the ledger is stored
            validator: Draft validator (a default one is created if None)
            id_factory: Called with the current ids, returns a fresh id
            audit_logger: Receives an event for every mutation and failure

        Raises:
            CorruptDataError: If the stored payload cannot be decoded
            DuplicateError: If the stored payload repeats an id
        """
        self._backend = backend
        self._key = key
        self._validator = validator or TransactionValidator()
        self._id_factory = id_factory or TimestampIdFactory()
        self._audit_logger = audit_logger
        self._transactions: list[Transaction] = []
        self.loaded_version: Optional[int] = None

        try:
            self._load()
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_ledger_load_failed(key, str(e))
            raise

    # -------------------------------------------------------------------------
    # Load / persist
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        raw = self._backend.get(self._key)
        if raw is None:
            self._transactions = []
            return

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Stored ledger is not valid JSON: {e}") from e

        records, version, backfilled = load_records(payload)

        try:
            transactions = [Transaction.model_validate(record) for record in records]
        except PydanticValidationError as e:
            raise CorruptDataError(f"Stored ledger contains an invalid record: {e}") from e

        seen: set[str] = set()
        for transaction in transactions:
            if transaction.id in seen:
                raise DuplicateError(f"Stored ledger repeats id {transaction.id}")
            seen.add(transaction.id)

        self._transactions = transactions
        self.loaded_version = version

        if self._audit_logger:
            if version != SCHEMA_VERSION:
                self._audit_logger.log_legacy_migrated(backfilled, version)
            self._audit_logger.log_ledger_loaded(len(transactions), version)

    def _serialize(self) -> str:
        return json.dumps(
            {
                "version": SCHEMA_VERSION,
                "transactions": [t.model_dump(mode="json") for t in self._transactions],
            },
            ensure_ascii=False,
        )

    def _persist(self) -> None:
        """Write the full collection to the backing store."""
        try:
            self._backend.set(self._key, self._serialize())
        except (StorageError, OSError, TypeError, ValueError) as e:
            if self._audit_logger:
                self._audit_logger.log_persistence_failed(self._key, str(e))
            if isinstance(e, PersistenceError):
                raise
            raise PersistenceError(f"Failed to persist ledger: {e}") from e

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list(self) -> list[Transaction]:
        """The full collection in insertion order (a copy)."""
        return list(self._transactions)

    def get(self, transaction_id: str) -> Transaction:
        """
        Raises:
            NotFoundError: If no record has this id
        """
        index = self._index_of(transaction_id)
        if index is None:
            raise NotFoundError(f"No transaction with id {transaction_id}")
        return self._transactions[index]

    def __len__(self) -> int:
        return len(self._transactions)

    def _index_of(self, transaction_id: str) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        return None

    def _ids(self) -> set[str]:
        return {t.id for t in self._transactions}

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _validated_values(self, fields: Fields) -> dict[str, Any]:
        try:
            return self._validator.validate_or_raise(fields).values
        except ValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    [issue.model_dump() for issue in e.issues]
                )
            raise

    def _missing(self, transaction_id: str, operation: str) -> NotFoundError:
        if self._audit_logger:
            self._audit_logger.log_not_found(transaction_id, operation)
        return NotFoundError(f"Cannot {operation}: no transaction with id {transaction_id}")

    def create(self, fields: Fields) -> Transaction:
        """
        Validate, assign a fresh id, append and persist.

        Raises:
            ValidationError: If the draft is invalid (nothing changes)
            PersistenceError: If the write fails (the record is kept in memory)
        """
        values = self._validated_values(fields)

        transaction = Transaction(id=self._id_factory(self._ids()), **values)
        self._transactions.append(transaction)

        if self._audit_logger:
            self._audit_logger.log_transaction_created(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            )

        self._persist()
        return transaction

    def update(self, transaction_id: str, fields: Fields) -> Transaction:
        """
        Replace the record with this id in place, keeping its id and position.

        Raises:
            NotFoundError: If no record has this id
            ValidationError: If the draft is invalid (nothing changes)
            PersistenceError: If the write fails (the update is kept in memory)
        """
        index = self._index_of(transaction_id)
        if index is None:
            raise self._missing(transaction_id, "update")

        values = self._validated_values(fields)

        transaction = Transaction(id=transaction_id, **values)
        self._transactions[index] = transaction

        if self._audit_logger:
            self._audit_logger.log_transaction_updated(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            )

        self._persist()
        return transaction

    def delete(self, transaction_id: str) -> Transaction:
        """
        Remove and return the record with this id.

        Raises:
            NotFoundError: If no record has this id (nothing changes)
            PersistenceError: If the write fails (the record stays deleted in memory)
        """
        index = self._index_of(transaction_id)
        if index is None:
            raise self._missing(transaction_id, "delete")

        removed = self._transactions.pop(index)

        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(transaction_id)

        self._persist()
        return removed

    def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        removed = len(self._transactions)
        self._transactions = []

        if self._audit_logger:
            self._audit_logger.log_ledger_cleared(removed)

        self._persist()
        return removed
