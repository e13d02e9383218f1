"""Mini README: Entry point CLI for the Ledger Desk service.

This script exposes a Typer CLI that starts the FastAPI application and
offers offline maintenance commands: exporting a spreadsheet straight from
the stored document and clearing the collection. Settings come from
``LEDGERDESK_`` environment variables unless overridden on the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from ledgerdesk.configuration import get_settings
from ledgerdesk.errors import LedgerError
from ledgerdesk.interface.web_app import build_ledger
from ledgerdesk.logging_utils import configure_root_logger, level_for_environment
from ledgerdesk.ranges import RangeSpec

cli = typer.Typer(help="Run and maintain the Ledger Desk transaction service.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    # Browsers cannot open the 0.0.0.0 wildcard, so point them at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Ledger Desk on "
        f"{effective_host}:{effective_port}.\n"
        "Open your browser at "
        f"http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "ledgerdesk.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def export(
    range_: Optional[str] = typer.Option(
        None, "--range", help="Preset (1w, 1m, 3m, 6m) or 'custom'."
    ),
    from_date: Optional[str] = typer.Option(None, "--from", help="Start date, dd/mm/yyyy."),
    to_date: Optional[str] = typer.Option(None, "--to", help="End date, dd/mm/yyyy."),
    output: Optional[Path] = typer.Option(
        None, help="Destination file or directory (defaults to the current directory)."
    ),
) -> None:
    """Write the selected transactions to an xlsx file."""

    configure_root_logger()
    ledger = build_ledger(get_settings())
    try:
        exported = ledger.export(RangeSpec.from_query(range_, from_date, to_date))
    except LedgerError as error:
        typer.echo(f"Export failed: {error.message}", err=True)
        raise typer.Exit(code=1) from error

    destination = output or Path.cwd()
    if destination.is_dir():
        destination = destination / exported.filename
    destination.write_bytes(exported.content)
    typer.echo(f"Wrote {exported.row_count} transactions to {destination}")


@cli.command()
def clear(
    purge_receipts: Optional[bool] = typer.Option(
        None,
        "--purge-receipts/--keep-receipts",
        help="Delete or keep stored receipt documents (defaults to the configured policy).",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Remove every stored transaction."""

    if not yes:
        typer.confirm("Remove every stored transaction?", abort=True)
    configure_root_logger()
    ledger = build_ledger(get_settings())
    removed = ledger.clear(purge_receipts=purge_receipts)
    typer.echo(f"Cleared all transactions ({removed} receipts deleted).")


if __name__ == "__main__":
    cli()
