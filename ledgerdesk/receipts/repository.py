"""Mini README: Receipt document repository.

Structure:
    * ReceiptRepository - writes, locates and removes receipt files.
    * check_upload - content-type and size gate applied at the upload boundary.

Stored names combine a millisecond timestamp with a random UUID fragment so
concurrent uploads never collide. Only ``pdf``, ``doc`` and ``docx``
extensions survive; anything else is stored as ``.bin``. Deletion is best
effort and never raises.
"""

from __future__ import annotations

import time
import uuid
from pathlib import Path, PurePath
from typing import Optional

from ..errors import FileTooLarge, UnsupportedFileType
from ..logging_utils import get_logger
from ..records.models import StoredReceiptFields

LOGGER = get_logger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
KEPT_EXTENSIONS = frozenset({"pdf", "doc", "docx"})
FALLBACK_EXTENSION = "bin"


def check_upload(content_type: Optional[str], size: int, max_bytes: int) -> None:
    """Reject uploads that are not PDF/Word documents or exceed ``max_bytes``."""

    if (content_type or "").split(";")[0].strip().lower() not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedFileType()
    if size > max_bytes:
        raise FileTooLarge()


def _extension_for(original_name: str) -> str:
    _, dot, suffix = original_name.rpartition(".")
    extension = suffix.lower() if dot else ""
    return extension if extension in KEPT_EXTENSIONS else FALLBACK_EXTENSION


class ReceiptRepository:
    """Persist receipt bytes in a directory and expose them by URL."""

    def __init__(self, directory: Path, url_prefix: str = "/receipts") -> None:
        self._directory = Path(directory)
        self._url_prefix = url_prefix.rstrip("/")
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def generate_name(self, original_name: str) -> str:
        """Return a collision-resistant file name for ``original_name``."""

        millis = int(time.time() * 1000)
        return f"{millis}_{uuid.uuid4().hex[:8]}.{_extension_for(original_name)}"

    def path_for(self, stored_name: str) -> Path:
        # Only the final component counts so names cannot escape the directory.
        return self._directory / PurePath(stored_name).name

    def url_for(self, stored_name: str) -> str:
        return f"{self._url_prefix}/{stored_name}"

    def exists(self, stored_name: str) -> bool:
        return bool(stored_name) and self.path_for(stored_name).is_file()

    def store(self, original_name: str, data: bytes) -> StoredReceiptFields:
        """Write ``data`` under a generated name and describe where it lives."""

        stored_name = self.generate_name(original_name)
        destination = self.path_for(stored_name)
        destination.write_bytes(data)
        LOGGER.info(
            "Stored receipt %s as %s (%s bytes)", original_name, stored_name, len(data)
        )
        return StoredReceiptFields(
            original_name=original_name,
            stored_name=stored_name,
            url=self.url_for(stored_name),
        )

    def delete(self, stored_name: Optional[str]) -> None:
        """Remove a stored receipt if present, swallowing any filesystem error."""

        if not stored_name:
            return
        try:
            self.path_for(stored_name).unlink(missing_ok=True)
            LOGGER.info("Deleted receipt %s", stored_name)
        except OSError:
            LOGGER.debug("Could not delete receipt %s", stored_name, exc_info=True)

    def purge_all(self) -> int:
        """Delete every stored receipt and return how many files were removed."""

        removed = 0
        for path in list(self._directory.iterdir()):
            if not path.is_file():
                continue
            self.delete(path.name)
            if not path.exists():
                removed += 1
        LOGGER.info("Purged %s receipts from %s", removed, self._directory)
        return removed
