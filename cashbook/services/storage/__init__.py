"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The local file backend is the default; the in-memory one serves tests.
"""

from cashbook.services.storage.interface import (
    CorruptDataError,
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from cashbook.services.storage.local_file import LocalFileKeyValueStore
from cashbook.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "DuplicateError",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "LocalFileKeyValueStore",
]
