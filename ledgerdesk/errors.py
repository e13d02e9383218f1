"""Mini README: Error taxonomy shared by the ledger and its HTTP surface.

Every error carries the HTTP status it maps to so the web layer can answer
with ``{"error": message}`` without a lookup table. Messages on client errors
are meant for end users; ``StorageIOError`` keeps a generic public message
and leaves the details to the logs.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for failures reported to API callers."""

    status_code = 500
    public_message = "Unexpected ledger failure"
    expose_message = True

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)

    @property
    def message(self) -> str:
        """Text safe to hand back to API callers."""

        return str(self) if self.expose_message else self.public_message


class ValidationError(LedgerError):
    """Raised when submitted transaction fields cannot be accepted."""

    status_code = 400
    public_message = "Invalid transaction fields"


class MissingField(ValidationError):
    public_message = "date, name, transactionType, amount are required"


class InvalidIdentity(ValidationError):
    public_message = "Invalid Aadhar number. Expected: 1234 5678 1234"


class InvalidPhone(ValidationError):
    public_message = "Invalid phone number. Enter exactly 10 digits (e.g., 9876543210)."


class InvalidAmount(ValidationError):
    public_message = "Invalid amount. Enter a number such as 1,234.50"


class InvalidDateRange(ValidationError):
    public_message = "Invalid date range. Use dd/mm/yyyy dates."


class NotFound(LedgerError):
    status_code = 404
    public_message = "Transaction not found"


class EmptySelection(LedgerError):
    status_code = 400
    public_message = "No data in selected range"


class UnsupportedFileType(LedgerError):
    status_code = 415
    public_message = "Only PDF or DOC/DOCX files are allowed"


class FileTooLarge(LedgerError):
    status_code = 413
    public_message = "Receipt exceeds the maximum upload size"


class StorageIOError(LedgerError):
    """Raised when the transaction document cannot be written."""

    status_code = 500
    public_message = "Transaction storage is unavailable"
    expose_message = False
