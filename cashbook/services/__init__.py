"""Services package."""

from cashbook.services.storage import (
    CorruptDataError,
    DuplicateError,
    InMemoryKeyValueStore,
    KeyValueStore,
    LocalFileKeyValueStore,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from cashbook.services.ledger import TimestampIdFactory, TransactionStore
from cashbook.services.notes import NotesStore
from cashbook.services.export import CsvExport

__all__ = [
    # Storage services
    "CorruptDataError",
    "DuplicateError",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "LocalFileKeyValueStore",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Ledger
    "TimestampIdFactory",
    "TransactionStore",
    # Collaborators
    "CsvExport",
    "NotesStore",
]
