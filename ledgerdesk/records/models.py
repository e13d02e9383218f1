"""Mini README: Transaction record dataclass and its JSON mapping.

Structure:
    * Transaction - one manually entered ledger record.
    * StoredReceiptFields - the optional receipt attachment triple.
    * utc_timestamp - ISO-8601 timestamps in the format the API emits.

Records are persisted with camelCase keys. ``as_dict`` omits optional fields
that are unset so a record read back from disk compares equal to the one
written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

NOT_AVAILABLE = "N/A"


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Render ``moment`` (default now) as ``2024-01-15T10:00:00.000Z``."""

    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


@dataclass(slots=True, frozen=True)
class StoredReceiptFields:
    """Receipt metadata carried by a record once a document is stored."""

    original_name: str
    stored_name: str
    url: str


@dataclass(slots=True)
class Transaction:
    """Represent a manually entered transaction."""

    id: str
    date: str
    name: str
    transaction_type: str
    amount: float
    aadhar_number: str = NOT_AVAILABLE
    phone: str = NOT_AVAILABLE
    created_at: str = field(default_factory=utc_timestamp)
    updated_at: Optional[str] = None
    receipt_original_name: Optional[str] = None
    receipt_stored_name: Optional[str] = None
    receipt_url: Optional[str] = None

    def attach_receipt(self, receipt: StoredReceiptFields) -> None:
        self.receipt_original_name = receipt.original_name
        self.receipt_stored_name = receipt.stored_name
        self.receipt_url = receipt.url

    def as_dict(self) -> Dict[str, Any]:
        """Export the record with the camelCase keys used on disk and on the wire."""

        payload: Dict[str, Any] = {
            "id": self.id,
            "date": self.date,
            "name": self.name,
            "transactionType": self.transaction_type,
            "amount": self.amount,
            "aadharNumber": self.aadhar_number,
            "phone": self.phone,
            "createdAt": self.created_at,
        }
        optional = {
            "updatedAt": self.updated_at,
            "receiptOriginalName": self.receipt_original_name,
            "receiptStoredName": self.receipt_stored_name,
            "receiptUrl": self.receipt_url,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        """Rebuild a record from its persisted form, tolerating absent keys."""

        amount = payload.get("amount")
        return cls(
            id=str(payload.get("id", "")),
            date=str(payload.get("date") or ""),
            name=str(payload.get("name") or ""),
            transaction_type=str(payload.get("transactionType") or ""),
            amount=float(amount) if isinstance(amount, (int, float)) else 0.0,
            aadhar_number=payload.get("aadharNumber") or NOT_AVAILABLE,
            phone=payload.get("phone") or NOT_AVAILABLE,
            created_at=payload.get("createdAt") or "",
            updated_at=payload.get("updatedAt"),
            receipt_original_name=payload.get("receiptOriginalName"),
            receipt_stored_name=payload.get("receiptStoredName"),
            receipt_url=payload.get("receiptUrl"),
        )
