"""Workbook Codec - the persisted dataset format (one XLSX sheet, fixed columns).

Invariants:
    - Header row is exactly COLUMN_ORDER; one row per record in insertion order
    - Every cell is written as text so phones and ids never turn into numbers
    - decode(encode(records)) == records
    - A workbook without the dataset sheet decodes to an empty dataset
    - Unreadable payloads raise; the caller decides how to surface it

Design Decisions:
    - XLSX keeps the dataset openable by staff in a spreadsheet tool
    - Columns matched by header name on read: reordered columns still load
    - encode returns bytes: the store hands them to atomic_write_bytes
"""

import io
from typing import Iterable

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter

from registrations.core.domain_types import COLUMN_ORDER
from registrations.core.registration import Registration

DEFAULT_SHEET_NAME = "Registrations"
DATASET_COLUMN_WIDTHS: tuple[int, ...] = (38, 28, 32, 14, 15, 18, 16, 16, 18, 26)


def keep_as_text(cells) -> None:
    """Stop openpyxl reading user text that starts with "=" as a formula."""
    for cell in cells:
        if cell.data_type == "f":
            cell.data_type = "s"


def encode_dataset(
    records: Iterable[Registration], sheet_name: str = DEFAULT_SHEET_NAME,
) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append(list(COLUMN_ORDER))
    for record in records:
        row = record.to_row()
        ws.append([row[key] for key in COLUMN_ORDER])
        keep_as_text(ws[ws.max_row])
    for i, width in enumerate(DATASET_COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def decode_dataset(
    payload: bytes, sheet_name: str = DEFAULT_SHEET_NAME,
) -> list[Registration]:
    wb = load_workbook(io.BytesIO(payload), read_only=True, data_only=True)
    try:
        if sheet_name not in wb.sheetnames:
            return []
        rows = wb[sheet_name].iter_rows(values_only=True)
        header = next(rows, None)
        if not header:
            return []
        keys = [str(h).strip() if h is not None else "" for h in header]
        records = []
        for values in rows:
            if values is None or all(v in (None, "") for v in values):
                continue
            records.append(Registration.from_row(dict(zip(keys, values))))
        return records
    finally:
        wb.close()
