"""Mini README: Tests for receipt storage and the upload gate."""

from __future__ import annotations

from pathlib import Path

import pytest

from ledgerdesk.errors import FileTooLarge, UnsupportedFileType
from ledgerdesk.receipts import ReceiptRepository, check_upload


def test_store_keeps_document_extension_and_builds_url(tmp_path: Path) -> None:
    repository = ReceiptRepository(tmp_path / "receipts")

    stored = repository.store("Bank Slip.PDF", b"%PDF-1.4")

    assert stored.original_name == "Bank Slip.PDF"
    assert stored.stored_name.endswith(".pdf")
    assert stored.url == f"/receipts/{stored.stored_name}"
    assert repository.path_for(stored.stored_name).read_bytes() == b"%PDF-1.4"


@pytest.mark.parametrize("name", ["scan.exe", "noextension", "archive.tar.gz"])
def test_store_substitutes_generic_extension(tmp_path: Path, name: str) -> None:
    stored = ReceiptRepository(tmp_path).store(name, b"data")
    assert stored.stored_name.endswith(".bin")


def test_generated_names_do_not_collide(tmp_path: Path) -> None:
    repository = ReceiptRepository(tmp_path)
    names = {repository.generate_name("a.docx") for _ in range(200)}
    assert len(names) == 200


def test_delete_is_best_effort(tmp_path: Path) -> None:
    repository = ReceiptRepository(tmp_path)
    stored = repository.store("a.doc", b"doc")

    repository.delete(stored.stored_name)
    repository.delete(stored.stored_name)
    repository.delete(None)

    assert not repository.exists(stored.stored_name)


def test_delete_cannot_escape_directory(tmp_path: Path) -> None:
    outside = tmp_path / "keep.pdf"
    outside.write_bytes(b"keep")
    repository = ReceiptRepository(tmp_path / "receipts")

    repository.delete("../keep.pdf")

    assert outside.exists()


def test_purge_all_removes_every_receipt(tmp_path: Path) -> None:
    repository = ReceiptRepository(tmp_path)
    first = repository.store("a.pdf", b"1")
    second = repository.store("b.docx", b"2")

    assert repository.purge_all() == 2
    assert not repository.exists(first.stored_name)
    assert not repository.exists(second.stored_name)


def test_check_upload_accepts_pdf_and_word_documents() -> None:
    check_upload("application/pdf", 10, 100)
    check_upload("application/msword", 10, 100)
    check_upload(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document", 100, 100
    )


def test_check_upload_rejects_other_types_and_oversized_files() -> None:
    with pytest.raises(UnsupportedFileType):
        check_upload("image/png", 10, 100)
    with pytest.raises(FileTooLarge):
        check_upload("application/pdf", 101, 100)
