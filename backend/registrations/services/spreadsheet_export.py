"""Spreadsheet Export - admin download of all registrations as an XLSX buffer.

Invariants:
    - One sheet: display header row, then one row per record in newest-first order
    - Student ID column is derived at render time, never read from storage
    - Registration Date is an en-IN locale string in the report timezone
    - Any failure raises ExportError; no partial buffer is returned
"""

import io
import logging
from datetime import tzinfo
from typing import Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from registrations.core.errors import ExportError
from registrations.core.registration import Registration
from registrations.core.report_layout import (
    SPREADSHEET_COLUMN_WIDTHS, SPREADSHEET_HEADERS, SPREADSHEET_SHEET_NAME,
    spreadsheet_rows,
)
from registrations.infrastructure.workbook_codec import keep_as_text

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)


def render_spreadsheet(records: Sequence[Registration], zone: tzinfo) -> bytes:
    """Render the snapshot to XLSX bytes."""
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = SPREADSHEET_SHEET_NAME
        ws.append(list(SPREADSHEET_HEADERS))
        for row in spreadsheet_rows(records, zone):
            ws.append(row)
            keep_as_text(ws[ws.max_row])
        for i, width in enumerate(SPREADSHEET_COLUMN_WIDTHS, start=1):
            ws.column_dimensions[get_column_letter(i)].width = width

        buffer = io.BytesIO()
        wb.save(buffer)
    except Exception as e:
        logger.error(
            f"Spreadsheet export failed: {e}",
            extra={"export_format": "xlsx"}, exc_info=True,
        )
        raise ExportError("xlsx", str(e)) from e
    return buffer.getvalue()
