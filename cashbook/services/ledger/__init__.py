"""Ledger store package."""

from cashbook.services.ledger.migrations import LEGACY_VERSION, SCHEMA_VERSION
from cashbook.services.ledger.store import (
    DEFAULT_TRANSACTIONS_KEY,
    TimestampIdFactory,
    TransactionStore,
)

__all__ = [
    "DEFAULT_TRANSACTIONS_KEY",
    "LEGACY_VERSION",
    "SCHEMA_VERSION",
    "TimestampIdFactory",
    "TransactionStore",
]
