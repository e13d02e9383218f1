"""Mini README: Export utilities for Ledger Desk.

Exposes the spreadsheet exporter used by the download endpoint and the CLI,
together with the helpers that name and label exported files.
"""

from .spreadsheet_exporter import XLSX_MEDIA_TYPE, SpreadsheetExporter, export_filename

__all__ = ["SpreadsheetExporter", "XLSX_MEDIA_TYPE", "export_filename"]
