"""Mini README: Centralised configuration for Ledger Desk.

Structure:
    * LedgerDeskSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor shared by the CLI and the web app.

Usage:
    Every field can be overridden with a ``LEDGERDESK_`` prefixed environment
    variable or a ``.env`` file. Relative storage paths are resolved against
    ``data_directory`` so a single variable relocates all persisted state.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings

MEBIBYTE = 1024 * 1024


class LedgerDeskSettings(BaseSettings):
    """Runtime configuration for the Ledger Desk service."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        validate_default=True,
        description="Directory holding the transaction document and uploaded receipts.",
    )
    transactions_file: Path = Field(
        Path("transactions.json"),
        description="JSON document storing the full transaction collection.",
    )
    receipts_directory: Path = Field(
        Path("uploads") / "receipts",
        description="Directory where uploaded receipt documents are written.",
    )
    receipts_url_prefix: str = Field(
        "/receipts",
        description="Public path under which stored receipts are served.",
    )
    max_receipt_bytes: int = Field(
        15 * MEBIBYTE,
        description="Largest receipt upload accepted, in bytes.",
        ge=1,
    )
    purge_receipts_on_clear: bool = Field(
        False,
        description=(
            "Delete every stored receipt when the collection is cleared."
            " Disabled by default so clearing records never destroys documents."
        ),
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        3000,
        description="Port the HTTP service exposes.",
        ge=1,
        le=65535,
    )

    class Config:
        env_prefix = "LEDGERDESK_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure the data directory expands user paths and exists."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("receipts_url_prefix")
    def _normalise_prefix(cls, value: str) -> str:
        """Keep a single leading slash and no trailing slash."""

        return "/" + value.strip().strip("/")

    @property
    def transactions_path(self) -> Path:
        return self.data_directory / self.transactions_file

    @property
    def receipts_path(self) -> Path:
        return self.data_directory / self.receipts_directory


@lru_cache()
def get_settings() -> LedgerDeskSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return LedgerDeskSettings()
