"""Admin Exports - full-dataset XLSX and PDF downloads.

Invariants:
    - Exports render the full snapshot taken at request time, newest first
    - Filename is "<prefix>_<YYYY-MM-DD>.<ext>", stamped when the request arrives
    - Rendering runs in a worker thread; a failure returns an error, never partial bytes
"""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response

from registrations.api.dependencies import get_record_store, require_admin
from registrations.config import Settings, get_settings
from registrations.core.repository_protocols import RegistrationRepository
from registrations.infrastructure.observability import log_duration
from registrations.services.pdf_export import PDF_CONTENT_TYPE, render_pdf
from registrations.services.spreadsheet_export import (
    XLSX_CONTENT_TYPE, render_spreadsheet,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin/download", tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _attachment(payload: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=payload,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def export_filename(prefix: str, extension: str, now: datetime) -> str:
    return f"{prefix}_{now.date().isoformat()}.{extension}"


@router.get("/xlsx")
async def download_xlsx(
    store: RegistrationRepository = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    now = datetime.now(timezone.utc)
    records = store.snapshot()
    with log_duration(logger, "Spreadsheet export rendered", export_format="xlsx"):
        payload = await asyncio.to_thread(
            render_spreadsheet, records, settings.report_zone,
        )
    logger.info(
        "Spreadsheet export generated",
        extra={"export_format": "xlsx", "record_count": len(records)},
    )
    return _attachment(
        payload, XLSX_CONTENT_TYPE,
        export_filename(settings.export_filename_prefix, "xlsx", now),
    )


@router.get("/pdf")
async def download_pdf(
    store: RegistrationRepository = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    now = datetime.now(timezone.utc)
    records = store.snapshot()
    with log_duration(logger, "PDF export rendered", export_format="pdf"):
        payload = await asyncio.to_thread(
            render_pdf, records, settings.report_zone, now,
            settings.report_font_path, settings.report_bold_font_path,
        )
    logger.info(
        "PDF export generated",
        extra={"export_format": "pdf", "record_count": len(records)},
    )
    return _attachment(
        payload, PDF_CONTENT_TYPE,
        export_filename(settings.export_filename_prefix, "pdf", now),
    )
