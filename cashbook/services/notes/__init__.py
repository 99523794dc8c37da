"""Free-text notes kept alongside the ledger."""

from cashbook.services.notes.store import DEFAULT_NOTES_KEY, NotesStore

__all__ = ["DEFAULT_NOTES_KEY", "NotesStore"]
