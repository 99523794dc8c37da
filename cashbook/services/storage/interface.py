"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through an abstract key-value port.
This allows us to:
1. Keep data on local disk by default
2. Use in-memory storage for testing
3. Swap in another backend without touching ledger logic

The interface mirrors a browser-style key-value store: string values
under string keys. Serialization is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for the durable backing store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            PersistenceError: If the removal fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Stored data contains the same identifier more than once."""
    pass


class CorruptDataError(StorageError):
    """Stored payload could not be decoded into valid records."""
    pass


class PersistenceError(StorageError):
    """A write to the backing store failed."""
    pass
