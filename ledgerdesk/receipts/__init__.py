"""Mini README: Storage for uploaded receipt documents.

Exports the repository that writes receipt bytes under generated names and
the upload rules the HTTP layer enforces before bytes reach it.
"""

from .repository import ALLOWED_CONTENT_TYPES, ReceiptRepository, check_upload

__all__ = ["ALLOWED_CONTENT_TYPES", "ReceiptRepository", "check_upload"]
