"""Mini README: FastAPI service exposing the transaction ledger.

Structure:
    * create_application - application factory wiring routes, static mounts
      and the dashboard template around a ``TransactionLedger``.
    * _read_receipt - upload boundary enforcing receipt type and size limits.

Ledger errors map to ``{"error": message}`` bodies with the status each error
declares. Anything unexpected is logged with its traceback and answered with
a generic 500 so internal details never reach the browser.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from ..configuration import LedgerDeskSettings, get_settings
from ..errors import LedgerError
from ..export import XLSX_MEDIA_TYPE
from ..finance import ReceiptUpload, TransactionLedger
from ..logging_utils import configure_root_logger, get_logger, level_for_environment
from ..ranges import RangeSpec
from ..receipts import ReceiptRepository, check_upload
from ..records import JsonRecordStore
from ..records.models import utc_timestamp

LOGGER = get_logger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_receipt(
    upload: Optional[UploadFile], max_bytes: int
) -> Optional[ReceiptUpload]:
    """Return the uploaded receipt, or ``None`` when the field was left empty."""

    if upload is None or not upload.filename:
        return None
    data = await upload.read(max_bytes + 1)
    check_upload(upload.content_type, len(data), max_bytes)
    LOGGER.debug("Accepted receipt upload %s (%s bytes)", upload.filename, len(data))
    return ReceiptUpload(original_name=upload.filename, data=data)


def build_ledger(settings: LedgerDeskSettings) -> TransactionLedger:
    """Create the ledger and its storage collaborators from settings."""

    store = JsonRecordStore(settings.transactions_path)
    store.ensure_document()
    receipts = ReceiptRepository(settings.receipts_path, settings.receipts_url_prefix)
    return TransactionLedger(
        store,
        receipts,
        purge_receipts_on_clear=settings.purge_receipts_on_clear,
    )


def create_application(settings: Optional[LedgerDeskSettings] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    app = FastAPI(title="Ledger Desk", version="1.0.0")
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    static_directory = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_directory)), name="static")

    ledger = build_ledger(settings)
    app.state.ledger = ledger
    app.mount(
        settings.receipts_url_prefix,
        StaticFiles(directory=str(settings.receipts_path)),
        name="receipts",
    )
    max_receipt_bytes = settings.max_receipt_bytes

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, error: LedgerError) -> JSONResponse:
        if error.status_code >= 500:
            LOGGER.error("%s %s failed: %s", request.method, request.url.path, error, exc_info=error)
        else:
            LOGGER.info("%s %s rejected: %s", request.method, request.url.path, error)
        return _error_response(error.status_code, error.message)

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request) -> HTMLResponse:
        """Render the manual-entry page."""

        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "max_receipt_mib": max_receipt_bytes // (1024 * 1024),
            },
        )

    @app.get("/api/transactions")
    async def list_transactions(
        selected_range: Optional[str] = Query(None, alias="range"),
        from_date: Optional[str] = Query(None, alias="from"),
        to_date: Optional[str] = Query(None, alias="to"),
    ) -> JSONResponse:
        """Return every transaction or those inside the requested window."""

        spec = RangeSpec.from_query(selected_range, from_date, to_date)
        transactions = ledger.list_transactions(spec)
        LOGGER.debug("Listing %s transactions for %s", len(transactions), spec)
        return JSONResponse({"transactions": [record.as_dict() for record in transactions]})

    @app.post("/api/manual-entry")
    async def manual_entry(
        date: Optional[str] = Form(None),
        name: Optional[str] = Form(None),
        transaction_type: Optional[str] = Form(None, alias="transactionType"),
        amount: Optional[str] = Form(None),
        aadhar_number: Optional[str] = Form(None, alias="aadharNumber"),
        phone: Optional[str] = Form(None),
        receipt: Optional[UploadFile] = File(None),
    ) -> JSONResponse:
        """Create a transaction from a multipart form submission."""

        try:
            upload = await _read_receipt(receipt, max_receipt_bytes)
            change = ledger.create_transaction(
                date=date,
                name=name,
                transaction_type=transaction_type,
                amount=amount,
                aadhar_number=aadhar_number,
                phone=phone,
                receipt=upload,
            )
        except LedgerError:
            raise
        except Exception:
            LOGGER.exception("Manual-entry error")
            return _error_response(500, "Failed to add transaction")
        return JSONResponse(
            {"added": 1, "total": change.total, "transaction": change.transaction.as_dict()}
        )

    @app.put("/api/transactions/{transaction_id}")
    async def update_transaction(
        transaction_id: str,
        date: Optional[str] = Form(None),
        name: Optional[str] = Form(None),
        transaction_type: Optional[str] = Form(None, alias="transactionType"),
        amount: Optional[str] = Form(None),
        aadhar_number: Optional[str] = Form(None, alias="aadharNumber"),
        phone: Optional[str] = Form(None),
        receipt: Optional[UploadFile] = File(None),
    ) -> JSONResponse:
        """Overwrite an existing transaction, optionally replacing its receipt."""

        try:
            upload = await _read_receipt(receipt, max_receipt_bytes)
            change = ledger.update_transaction(
                transaction_id,
                date=date,
                name=name,
                transaction_type=transaction_type,
                amount=amount,
                aadhar_number=aadhar_number,
                phone=phone,
                receipt=upload,
            )
        except LedgerError:
            raise
        except Exception:
            LOGGER.exception("Edit error for %s", transaction_id)
            return _error_response(500, "Failed to update transaction")
        return JSONResponse({"ok": True, "transaction": change.transaction.as_dict()})

    @app.delete("/api/transactions/{transaction_id}")
    async def delete_transaction(transaction_id: str) -> JSONResponse:
        """Delete a transaction together with its stored receipt."""

        try:
            total = ledger.delete_transaction(transaction_id)
        except LedgerError:
            raise
        except Exception:
            LOGGER.exception("Delete error for %s", transaction_id)
            return _error_response(500, "Failed to delete transaction")
        return JSONResponse({"ok": True, "total": total})

    @app.get("/api/download-excel")
    async def download_excel(
        selected_range: Optional[str] = Query(None, alias="range"),
        from_date: Optional[str] = Query(None, alias="from"),
        to_date: Optional[str] = Query(None, alias="to"),
    ) -> Response:
        """Stream the selected transactions as an xlsx attachment."""

        spec = RangeSpec.from_query(selected_range, from_date, to_date)
        try:
            exported = ledger.export(spec)
        except LedgerError:
            raise
        except Exception:
            LOGGER.exception("Excel error")
            return _error_response(500, "Failed to generate Excel")
        return Response(
            content=exported.content,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
        )

    @app.post("/api/clear")
    async def clear(
        purge_receipts: Optional[bool] = Query(None, alias="purgeReceipts"),
    ) -> JSONResponse:
        """Remove every transaction; receipts only go when purging is requested."""

        try:
            ledger.clear(purge_receipts=purge_receipts)
        except LedgerError:
            raise
        except Exception:
            LOGGER.exception("Clear error")
            return _error_response(500, "Failed to clear transactions")
        return JSONResponse({"ok": True})

    @app.get("/api/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "OK", "time": utc_timestamp()})

    LOGGER.info(
        "Ledger Desk ready (data: %s, receipts: %s)",
        settings.transactions_path,
        settings.receipts_path,
    )
    return app
