"""Mini README: Transaction records, their validation, and persistence.

Groups the record dataclass, the pure field validator, and the JSON document
store so the ledger service can import everything record-related from one
place.
"""

from .models import StoredReceiptFields, Transaction
from .store import JsonRecordStore
from .validation import ValidatedFields, normalise_transaction_type, validate_fields

__all__ = [
    "JsonRecordStore",
    "StoredReceiptFields",
    "Transaction",
    "ValidatedFields",
    "normalise_transaction_type",
    "validate_fields",
]
