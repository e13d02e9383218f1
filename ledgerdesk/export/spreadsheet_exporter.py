"""Mini README: Render transaction selections to ``.xlsx`` workbooks.

Structure:
    * SpreadsheetExporter - builds a single-sheet workbook with typed cells.
    * export_filename - download name encoding the active range selection.

The sheet carries a header row, an auto-filter across header and data,
amounts as numbers formatted ``#,##0.00`` and dates as real date cells shown
as ``dd/mm/yyyy``. Dates that do not parse stay as their original text.
"""

from __future__ import annotations

from datetime import datetime, time
from io import BytesIO
from typing import Sequence

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook

from ..errors import EmptySelection
from ..logging_utils import get_logger
from ..ranges import RangeSpec, parse_dmy, range_label
from ..records.models import NOT_AVAILABLE, Transaction

LOGGER = get_logger(__name__)

SHEET_TITLE = "Transactions"
HEADERS = ("Date", "Name", "Transaction Type", "Amount", "Aadhar Number", "Phone Number")
COLUMN_WIDTHS = (12, 22, 16, 14, 16, 16)
AMOUNT_FORMAT = "#,##0.00"
DATE_FORMAT = "dd/mm/yyyy"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
TEXT_COLUMNS = (2, 3, 5, 6)


def _text(value: object) -> str:
    """Drop control characters that xlsx cannot store."""

    return ILLEGAL_CHARACTERS_RE.sub("", str(value))


def export_filename(spec: RangeSpec) -> str:
    return f"transactions_{range_label(spec)}.xlsx"


class SpreadsheetExporter:
    """Serialise transactions into an in-memory xlsx workbook."""

    def build_workbook(self, records: Sequence[Transaction]) -> Workbook:
        """Return the populated workbook; raises ``EmptySelection`` for no rows."""

        if not records:
            raise EmptySelection()

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE
        sheet.append(HEADERS)

        for record in records:
            parsed = parse_dmy(record.date)
            sheet.append(
                [
                    datetime.combine(parsed, time.min) if parsed else _text(record.date),
                    _text(record.name),
                    _text(record.transaction_type),
                    float(record.amount),
                    _text(record.aadhar_number or NOT_AVAILABLE),
                    _text(record.phone or NOT_AVAILABLE),
                ]
            )
            row = sheet.max_row
            for column in TEXT_COLUMNS if parsed else (1, *TEXT_COLUMNS):
                # Text such as "=1+1" stays literal instead of becoming a formula.
                sheet.cell(row=row, column=column).data_type = "s"
            sheet.cell(row=row, column=4).number_format = AMOUNT_FORMAT
            if parsed:
                sheet.cell(row=row, column=1).number_format = DATE_FORMAT

        for index, width in enumerate(COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width
        sheet.auto_filter.ref = f"A1:{get_column_letter(len(HEADERS))}{len(records) + 1}"
        return workbook

    def export(self, records: Sequence[Transaction]) -> bytes:
        """Render ``records`` and return the xlsx file contents."""

        workbook = self.build_workbook(records)
        buffer = BytesIO()
        workbook.save(buffer)
        LOGGER.info("Exported %s transactions to spreadsheet", len(records))
        return buffer.getvalue()
