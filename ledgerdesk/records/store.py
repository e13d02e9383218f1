"""Mini README: Whole-document JSON persistence for transaction records.

Structure:
    * JsonRecordStore - load-all / save-all over a single JSON array.

The document is the single source of truth and is rewritten in full on every
save. Writes go to a temporary sibling file that then replaces the document,
so readers never observe a half-written file. Reads favour availability: a
missing, empty or corrupt document is treated as an empty collection.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from ..errors import StorageIOError
from ..logging_utils import get_logger
from .models import Transaction

LOGGER = get_logger(__name__)


class JsonRecordStore:
    """Persist the full transaction collection as one JSON document."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def ensure_document(self) -> None:
        """Create the parent directory and an empty document when absent."""

        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            self.save_all([])
            LOGGER.info("Initialised empty transaction document at %s", self._path)

    def load_all(self) -> List[Transaction]:
        """Return every stored record; never raises."""

        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError:
            LOGGER.warning("Could not read %s, treating as empty", self._path, exc_info=True)
            return []

        if not raw.strip():
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Transaction document %s is corrupt, treating as empty", self._path)
            return []
        if not isinstance(payload, list):
            LOGGER.warning("Transaction document %s is not an array, treating as empty", self._path)
            return []

        records = [Transaction.from_dict(entry) for entry in payload if isinstance(entry, dict)]
        LOGGER.debug("Loaded %s transactions from %s", len(records), self._path)
        return records

    def save_all(self, records: Iterable[Transaction]) -> None:
        """Replace the document with ``records``.

        Raises:
            StorageIOError: the document could not be written.
        """

        payload = [record.as_dict() for record in records]
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".transactions_", suffix=".json", dir=directory)
        except OSError as error:
            raise StorageIOError(f"Cannot prepare {self._path}: {error}") from error
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except OSError as error:
            raise StorageIOError(f"Cannot write {self._path}: {error}") from error
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    LOGGER.exception("Failed to clean up temporary file %s", tmp_path)
        LOGGER.debug("Saved %s transactions to %s", len(payload), self._path)
