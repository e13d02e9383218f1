"""Mini README: Interactive interfaces (web) for Ledger Desk.

Exports the FastAPI application factory serving the JSON API, the receipt
files and the manual-entry page.
"""

from .web_app import create_application

__all__ = ["create_application"]
