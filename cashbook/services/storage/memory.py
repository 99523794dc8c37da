"""In-memory key-value backend, used by tests and ephemeral sessions."""

from typing import Optional

from cashbook.services.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store. Contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
