"""
Local File Storage Implementation

DESIGN DECISION: Each key is stored as its own UTF-8 file inside a data
directory. This keeps the on-disk layout as simple as the browser
key-value store the ledger format was designed around:
1. One file per key, readable with any text editor
2. No database setup required
3. Atomic replacement on every write (temp file + rename)

TRADEOFFS:
- Whole-value rewrites on every mutation (fine for a personal ledger)
- No cross-process locking (single-user, single-device)
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cashbook.config import is_valid_storage_key
from cashbook.services.storage.interface import (
    KeyValueStore,
    PersistenceError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class LocalFileKeyValueStore(KeyValueStore):
    """
    File-per-key implementation of the key-value port.

    Transient OS errors on write are retried before surfacing as
    PersistenceError.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not is_valid_storage_key(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / key

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._write_atomic(path, value)
        except OSError as e:
            logger.error("storage_write_failed", key=key, error=str(e))
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(f"Failed to remove {path}: {e}") from e

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        reraise=True,
    )
    def _write_atomic(self, path: Path, value: str) -> None:
        """Write to a temp file in the same directory, then rename over the target."""
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
