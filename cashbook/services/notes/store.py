"""Notes store: one plain-text value under its own key."""

from typing import Optional

from cashbook.audit import AuditLogger
from cashbook.services.storage.interface import KeyValueStore


DEFAULT_NOTES_KEY = "cashbook_notes"


class NotesStore:
    """Read/write pass-through to the backing store."""

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = DEFAULT_NOTES_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._key = key
        self._audit_logger = audit_logger

    def load(self) -> str:
        return self._backend.get(self._key) or ""

    def save(self, text: str) -> None:
        self._backend.set(self._key, text)
        if self._audit_logger:
            self._audit_logger.log_notes_saved(len(text))

    def clear(self) -> None:
        self._backend.remove(self._key)
        if self._audit_logger:
            self._audit_logger.log_notes_cleared()
