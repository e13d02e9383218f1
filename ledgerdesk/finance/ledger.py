"""Mini README: Transaction ledger orchestrating storage, receipts and exports.

Structure:
    * ReceiptUpload - bytes and original name of an uploaded receipt.
    * LedgerChange - a mutated record plus the collection size afterwards.
    * ExportedSpreadsheet - rendered workbook and its download name.
    * TransactionLedger - list/create/update/delete/clear/export operations.

Each mutation loads the whole collection, changes it in memory, re-sorts it
newest first and writes it back. A re-entrant lock serialises these
read-modify-write sequences inside one process; separate processes sharing
the same document are not coordinated.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..errors import NotFound, StorageIOError
from ..export import SpreadsheetExporter, export_filename
from ..logging_utils import get_logger
from ..ranges import RangeSpec, compute_window, filter_records, record_datetime
from ..receipts import ReceiptRepository
from ..records import JsonRecordStore, Transaction, ValidatedFields, validate_fields
from ..records.models import utc_timestamp

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class ReceiptUpload:
    """An uploaded receipt that already passed the upload checks."""

    original_name: str
    data: bytes


@dataclass(slots=True, frozen=True)
class LedgerChange:
    transaction: Transaction
    total: int


@dataclass(slots=True, frozen=True)
class ExportedSpreadsheet:
    filename: str
    content: bytes
    row_count: int


def sort_newest_first(records: List[Transaction]) -> None:
    """Order records by date descending in place; ties keep insertion order."""

    records.sort(key=lambda record: record_datetime(record.date), reverse=True)


class TransactionLedger:
    """Coordinate validation, persistence and receipt files for transactions."""

    def __init__(
        self,
        store: JsonRecordStore,
        receipts: ReceiptRepository,
        *,
        exporter: Optional[SpreadsheetExporter] = None,
        purge_receipts_on_clear: bool = False,
    ) -> None:
        self._store = store
        self._receipts = receipts
        self._exporter = exporter or SpreadsheetExporter()
        self._purge_receipts_on_clear = purge_receipts_on_clear
        self._lock = threading.RLock()

    @staticmethod
    def _generate_id() -> str:
        return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"

    def _next_id(self, records: Sequence[Transaction]) -> str:
        taken = {record.id for record in records}
        candidate = self._generate_id()
        while candidate in taken:
            candidate = self._generate_id()
        return candidate

    def list_transactions(self, spec: Optional[RangeSpec] = None) -> List[Transaction]:
        """Return all records, or those inside the window ``spec`` selects."""

        records = self._store.load_all()
        if spec is None or spec.is_empty:
            return records
        return filter_records(records, compute_window(spec))

    def get_transaction(self, transaction_id: str) -> Transaction:
        for record in self._store.load_all():
            if record.id == transaction_id:
                return record
        raise NotFound()

    def _store_receipt(self, record: Transaction, receipt: ReceiptUpload) -> None:
        stored = self._receipts.store(receipt.original_name, receipt.data)
        record.attach_receipt(stored)

    def _persist(self, records: List[Transaction], *, rollback_receipt: Optional[str] = None) -> None:
        try:
            self._store.save_all(records)
        except StorageIOError:
            if rollback_receipt:
                self._receipts.delete(rollback_receipt)
            raise

    @staticmethod
    def _apply(record: Transaction, fields: ValidatedFields) -> None:
        record.date = fields.date
        record.name = fields.name
        record.transaction_type = fields.transaction_type
        record.amount = fields.amount
        record.aadhar_number = fields.aadhar_number
        record.phone = fields.phone

    def create_transaction(
        self,
        *,
        date: Optional[str],
        name: Optional[str],
        transaction_type: Optional[str],
        amount: object,
        aadhar_number: Optional[str] = None,
        phone: Optional[str] = None,
        receipt: Optional[ReceiptUpload] = None,
    ) -> LedgerChange:
        """Validate and append a new record, storing its receipt if given."""

        fields = validate_fields(date, name, transaction_type, amount, aadhar_number, phone)
        with self._lock:
            records = self._store.load_all()
            record = Transaction(
                id=self._next_id(records),
                date=fields.date,
                name=fields.name,
                transaction_type=fields.transaction_type,
                amount=fields.amount,
                aadhar_number=fields.aadhar_number,
                phone=fields.phone,
                created_at=utc_timestamp(),
            )
            if receipt is not None:
                self._store_receipt(record, receipt)
            records.append(record)
            sort_newest_first(records)
            self._persist(records, rollback_receipt=record.receipt_stored_name)
        LOGGER.info("Created transaction %s dated %s", record.id, record.date)
        return LedgerChange(transaction=record, total=len(records))

    def update_transaction(
        self,
        transaction_id: str,
        *,
        date: Optional[str],
        name: Optional[str],
        transaction_type: Optional[str],
        amount: object,
        aadhar_number: Optional[str] = None,
        phone: Optional[str] = None,
        receipt: Optional[ReceiptUpload] = None,
    ) -> LedgerChange:
        """Re-validate and overwrite a record, replacing its receipt if given."""

        with self._lock:
            records = self._store.load_all()
            record = next((item for item in records if item.id == transaction_id), None)
            if record is None:
                raise NotFound()
            fields = validate_fields(date, name, transaction_type, amount, aadhar_number, phone)

            self._apply(record, fields)
            record.updated_at = utc_timestamp()
            superseded = record.receipt_stored_name if receipt is not None else None
            if receipt is not None:
                self._store_receipt(record, receipt)
            sort_newest_first(records)
            self._persist(
                records, rollback_receipt=record.receipt_stored_name if receipt else None
            )
            # The old file goes only once no saved record points at it.
            self._receipts.delete(superseded)
        LOGGER.info("Updated transaction %s", transaction_id)
        return LedgerChange(transaction=record, total=len(records))

    def delete_transaction(self, transaction_id: str) -> int:
        """Remove a record and its receipt; return the remaining count."""

        with self._lock:
            records = self._store.load_all()
            index = next(
                (position for position, item in enumerate(records) if item.id == transaction_id),
                None,
            )
            if index is None:
                raise NotFound()
            removed = records.pop(index)
            self._store.save_all(records)
            self._receipts.delete(removed.receipt_stored_name)
        LOGGER.info("Deleted transaction %s", transaction_id)
        return len(records)

    def clear(self, purge_receipts: Optional[bool] = None) -> int:
        """Empty the collection.

        Receipt files are left on disk unless ``purge_receipts`` (or the
        ledger's configured default) asks for them to be removed. Returns the
        number of receipt files deleted.
        """

        purge = self._purge_receipts_on_clear if purge_receipts is None else purge_receipts
        with self._lock:
            self._store.save_all([])
            removed = self._receipts.purge_all() if purge else 0
        LOGGER.info("Cleared all transactions (receipts purged: %s)", removed)
        return removed

    def export(self, spec: Optional[RangeSpec] = None) -> ExportedSpreadsheet:
        """Render the records inside ``spec``'s window to an xlsx workbook.

        Raises:
            EmptySelection: no record falls inside the window.
        """

        spec = spec or RangeSpec()
        records = filter_records(self._store.load_all(), compute_window(spec))
        content = self._exporter.export(records)
        return ExportedSpreadsheet(
            filename=export_filename(spec), content=content, row_count=len(records)
        )
