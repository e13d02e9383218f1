"""Mini README: Ledger service for manually entered transactions.

The ledger ties together the record store, the receipt repository and the
spreadsheet exporter. HTTP handlers and the CLI call it instead of touching
storage directly, so every entry point shares the same validation, ordering
and receipt clean-up rules.
"""

from .ledger import (
    ExportedSpreadsheet,
    LedgerChange,
    ReceiptUpload,
    TransactionLedger,
    sort_newest_first,
)

__all__ = [
    "ExportedSpreadsheet",
    "LedgerChange",
    "ReceiptUpload",
    "TransactionLedger",
    "sort_newest_first",
]
