"""Mini README: Tests covering the transaction ledger service.

Structure:
    * create/update/delete - ordering, validation and receipt life cycle.
    * clear - idempotence and the optional receipt purge.
    * export - range filtering feeding the spreadsheet exporter.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ledgerdesk.errors import EmptySelection, InvalidPhone, NotFound, StorageIOError
from ledgerdesk.finance import ReceiptUpload, TransactionLedger
from ledgerdesk.ranges import RangeSpec, record_datetime
from ledgerdesk.receipts import ReceiptRepository
from ledgerdesk.records import JsonRecordStore


@pytest.fixture()
def receipts(tmp_path: Path) -> ReceiptRepository:
    return ReceiptRepository(tmp_path / "receipts")


@pytest.fixture()
def ledger(tmp_path: Path, receipts: ReceiptRepository) -> TransactionLedger:
    store = JsonRecordStore(tmp_path / "transactions.json")
    store.ensure_document()
    return TransactionLedger(store, receipts)


def _create(ledger: TransactionLedger, day: str, **overrides):
    values = dict(date=day, name="Asha", transaction_type="deposit", amount="100")
    values.update(overrides)
    return ledger.create_transaction(**values)


def test_create_normalises_and_persists(ledger: TransactionLedger) -> None:
    """Amounts with separators are stored as rounded numbers."""

    change = _create(ledger, "10/03/2024", amount="1,234.5", phone="98765 43210")

    assert change.total == 1
    created = change.transaction
    assert created.amount == pytest.approx(1234.50)
    assert created.transaction_type == "Deposit"
    assert created.phone == "9876543210"
    assert created.aadhar_number == "N/A"
    assert created.created_at.endswith("Z")
    assert created.updated_at is None
    assert ledger.get_transaction(created.id).as_dict() == created.as_dict()


def test_collection_stays_sorted_newest_first(ledger: TransactionLedger) -> None:
    _create(ledger, "01/01/2024")
    _create(ledger, "15/03/2024")
    middle = _create(ledger, "10/02/2024").transaction
    ledger.update_transaction(
        middle.id, date="01/12/2024", name="Asha", transaction_type="ATM", amount="5"
    )

    dates = [record_datetime(tx.date) for tx in ledger.list_transactions()]
    assert dates == sorted(dates, reverse=True)
    assert ledger.list_transactions()[0].id == middle.id


def test_identifiers_are_unique(ledger: TransactionLedger) -> None:
    ids = {_create(ledger, "01/01/2024").transaction.id for _ in range(25)}
    assert len(ids) == 25


def test_update_unknown_id_raises_not_found(ledger: TransactionLedger) -> None:
    with pytest.raises(NotFound):
        ledger.update_transaction(
            "missing", date="01/01/2024", name="A", transaction_type="ATM", amount="1"
        )


def test_failed_validation_leaves_record_untouched(ledger: TransactionLedger) -> None:
    original = _create(ledger, "01/01/2024", phone="9876543210").transaction

    with pytest.raises(InvalidPhone):
        ledger.update_transaction(
            original.id,
            date="02/02/2024",
            name="Changed",
            transaction_type="ATM",
            amount="1",
            phone="123",
        )

    assert ledger.get_transaction(original.id).as_dict() == original.as_dict()


def test_update_replaces_receipt_file(
    ledger: TransactionLedger, receipts: ReceiptRepository
) -> None:
    created = _create(
        ledger, "01/01/2024", receipt=ReceiptUpload("first.pdf", b"first")
    ).transaction
    old_name = created.receipt_stored_name
    assert receipts.exists(old_name)

    updated = ledger.update_transaction(
        created.id,
        date="01/01/2024",
        name="Asha",
        transaction_type="Deposit",
        amount="100",
        receipt=ReceiptUpload("second.docx", b"second"),
    ).transaction

    assert not receipts.exists(old_name)
    assert receipts.path_for(updated.receipt_stored_name).read_bytes() == b"second"
    assert updated.receipt_original_name == "second.docx"
    assert updated.receipt_url.endswith(updated.receipt_stored_name)
    assert updated.updated_at is not None


def test_update_without_upload_keeps_receipt(
    ledger: TransactionLedger, receipts: ReceiptRepository
) -> None:
    created = _create(ledger, "01/01/2024", receipt=ReceiptUpload("a.pdf", b"a")).transaction

    updated = ledger.update_transaction(
        created.id, date="02/01/2024", name="Asha", transaction_type="ATM", amount="7"
    ).transaction

    assert updated.receipt_stored_name == created.receipt_stored_name
    assert receipts.exists(created.receipt_stored_name)


def test_delete_removes_record_and_receipt(
    ledger: TransactionLedger, receipts: ReceiptRepository
) -> None:
    keep = _create(ledger, "01/01/2024").transaction
    doomed = _create(ledger, "02/01/2024", receipt=ReceiptUpload("a.pdf", b"a")).transaction

    assert ledger.delete_transaction(doomed.id) == 1
    assert not receipts.exists(doomed.receipt_stored_name)
    assert [tx.id for tx in ledger.list_transactions()] == [keep.id]
    with pytest.raises(NotFound):
        ledger.delete_transaction(doomed.id)


def test_clear_is_idempotent_and_keeps_receipts_by_default(
    ledger: TransactionLedger, receipts: ReceiptRepository
) -> None:
    created = _create(ledger, "01/01/2024", receipt=ReceiptUpload("a.pdf", b"a")).transaction

    assert ledger.clear() == 0
    assert ledger.clear() == 0
    assert ledger.list_transactions() == []
    assert receipts.exists(created.receipt_stored_name)


def test_clear_can_purge_receipts(ledger: TransactionLedger, receipts: ReceiptRepository) -> None:
    created = _create(ledger, "01/01/2024", receipt=ReceiptUpload("a.pdf", b"a")).transaction

    assert ledger.clear(purge_receipts=True) == 1
    assert not receipts.exists(created.receipt_stored_name)


def test_list_filters_by_range(ledger: TransactionLedger) -> None:
    inside = _create(ledger, "12/01/2024").transaction
    _create(ledger, "01/01/2024")

    selected = ledger.list_transactions(RangeSpec(range="1w", to_date="15/01/2024"))

    assert [tx.id for tx in selected] == [inside.id]
    assert len(ledger.list_transactions(RangeSpec())) == 2


def test_export_names_file_and_rejects_empty_window(ledger: TransactionLedger) -> None:
    _create(ledger, "12/01/2024")

    exported = ledger.export(RangeSpec(range="1w", to_date="15/01/2024"))
    assert exported.filename == "transactions_1_week.xlsx"
    assert exported.row_count == 1
    assert exported.content[:2] == b"PK"

    with pytest.raises(EmptySelection):
        ledger.export(RangeSpec(range="custom", from_date="01/06/2024", to_date="30/06/2024"))


def test_failed_save_discards_new_receipt(
    tmp_path: Path, receipts: ReceiptRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = JsonRecordStore(tmp_path / "transactions.json")
    ledger = TransactionLedger(store, receipts)

    def refuse(records) -> None:
        raise StorageIOError("disk full")

    monkeypatch.setattr(store, "save_all", refuse)
    with pytest.raises(StorageIOError):
        _create(ledger, "01/01/2024", receipt=ReceiptUpload("a.pdf", b"a"))

    assert list(receipts.directory.iterdir()) == []


def _refuse_saves(store: JsonRecordStore, monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(records) -> None:
        raise StorageIOError("disk full")

    monkeypatch.setattr(store, "save_all", refuse)


def test_failed_update_keeps_previous_receipt(
    tmp_path: Path, receipts: ReceiptRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = JsonRecordStore(tmp_path / "transactions.json")
    ledger = TransactionLedger(store, receipts)
    created = _create(ledger, "01/01/2024", receipt=ReceiptUpload("a.pdf", b"a")).transaction

    _refuse_saves(store, monkeypatch)
    with pytest.raises(StorageIOError):
        ledger.update_transaction(
            created.id,
            date="01/01/2024",
            name="Asha",
            transaction_type="Deposit",
            amount="100",
            receipt=ReceiptUpload("b.pdf", b"b"),
        )

    stored = ledger.get_transaction(created.id)
    assert stored.receipt_stored_name == created.receipt_stored_name
    assert receipts.exists(stored.receipt_stored_name)
    assert [path.name for path in receipts.directory.iterdir()] == [created.receipt_stored_name]


def test_failed_delete_keeps_receipt(
    tmp_path: Path, receipts: ReceiptRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    store = JsonRecordStore(tmp_path / "transactions.json")
    ledger = TransactionLedger(store, receipts)
    created = _create(ledger, "01/01/2024", receipt=ReceiptUpload("a.pdf", b"a")).transaction

    _refuse_saves(store, monkeypatch)
    with pytest.raises(StorageIOError):
        ledger.delete_transaction(created.id)

    assert ledger.get_transaction(created.id).receipt_stored_name == created.receipt_stored_name
    assert receipts.exists(created.receipt_stored_name)
