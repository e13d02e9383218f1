"""Mini README: Core package initializer for the Ledger Desk service.

Ledger Desk records manually entered financial transactions, keeps their
supporting receipts on disk, and exports date-filtered selections to
spreadsheets. This module only re-exports the logging helper so scripts can
grab a logger without knowing the package layout.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
