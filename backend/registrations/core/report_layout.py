"""Report Layout - pure row building and page planning for the two admin exports.

Invariants:
    - Both exports read the full snapshot ordered by sort_newest_first
    - Student IDs come from make_student_id only; they are never persisted
    - PDF pagination is decided BEFORE each data row: if the row would cross the
      bottom margin, a new page starts and the header row is placed again
    - The footer caption is placed exactly once, after the last row of the document

Design Decisions:
    - Layout split from drawing: page plans are plain data, testable without parsing PDF bytes
    - y coordinates are top-down (distance from the top edge); the drawing layer flips them
    - en-IN date formatting is done by hand; strftime %I zero-pads and has no lowercase am/pm
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Sequence

from registrations.core.query import sort_newest_first
from registrations.core.registration import Registration, make_student_id

REPORT_TITLE = "AI4Biz – Student Registrations Report"
REPORT_FOOTER = "AI4Biz – Basunagar, Madhyamgram | Confidential Admin Report"
SPREADSHEET_SHEET_NAME = "AI4Biz Registrations"

SPREADSHEET_HEADERS: tuple[str, ...] = (
    "Student ID", "Full Name", "Email", "Phone", "Board", "Class Completed",
    "Demo Status", "Enrollment Status", "Payment Status", "Registration Date",
)
SPREADSHEET_COLUMN_WIDTHS: tuple[int, ...] = (14, 28, 32, 14, 15, 18, 16, 18, 18, 26)


@dataclass(frozen=True)
class PdfColumn:
    label: str
    width: float


PDF_COLUMNS: tuple[PdfColumn, ...] = (
    PdfColumn("#", 22),
    PdfColumn("Student ID", 72),
    PdfColumn("Name", 100),
    PdfColumn("Email", 130),
    PdfColumn("Phone", 72),
    PdfColumn("Board", 58),
    PdfColumn("Class", 80),
    PdfColumn("Demo", 65),
    PdfColumn("Enrolled", 65),
    PdfColumn("Payment", 78),
)

PDF_MARGIN = 30.0
PDF_ROW_HEIGHT = 18.0
PDF_HEADER_HEIGHT = 22.0
PDF_FONT_SIZE = 7.5
PDF_TITLE_SIZE = 16.0
PDF_SUBTITLE_SIZE = 9.0
PDF_FOOTER_SIZE = 8.0
PDF_TITLE_Y = PDF_MARGIN
PDF_SUBTITLE_Y = PDF_MARGIN + 22.0
PDF_TABLE_TOP = PDF_MARGIN + 40.0
PDF_FOOTER_GAP = 6.0
PDF_FOOTER_HEIGHT = 12.0


# ─── Shared ──────────────────────────────────────────────────────

def format_locale_datetime(moment: datetime, zone: tzinfo) -> str:
    """Render like en-IN toLocaleString: '17/10/2026, 5:30:00 pm'."""
    local = moment.astimezone(zone)
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{local:%d/%m/%Y}, {hour}:{local:%M:%S} {meridiem}"


def export_order(records: Sequence[Registration]) -> list[Registration]:
    return sort_newest_first(records)


# ─── Spreadsheet ─────────────────────────────────────────────────

def spreadsheet_rows(
    records: Sequence[Registration], zone: tzinfo,
) -> list[list[str]]:
    """Data rows (header excluded) in export order."""
    return [
        [
            make_student_id(r.id), r.full_name, r.email, r.phone, r.board,
            r.class_completed, r.demo_status, r.enrollment_status,
            r.payment_status,
            format_locale_datetime(r.registered_at, zone) if r.registration_date else "",
        ]
        for r in export_order(records)
    ]


# ─── Tabular document ────────────────────────────────────────────

def pdf_cells(index: int, record: Registration) -> list[str]:
    """Cells for one table row; index is 0-based, displayed 1-based."""
    return [
        str(index + 1), make_student_id(record.id), record.full_name,
        record.email, record.phone, record.board, record.class_completed,
        record.demo_status, record.enrollment_status, record.payment_status,
    ]


def report_subtitle(generated_at: datetime, total: int, zone: tzinfo) -> str:
    return (
        f"Generated: {format_locale_datetime(generated_at, zone)}"
        f"  |  Total: {total} student(s)"
    )


@dataclass
class RowPlacement:
    index: int
    y: float
    shaded: bool


@dataclass
class PagePlan:
    header_y: float | None = None
    rows: list[RowPlacement] = field(default_factory=list)
    footer_y: float | None = None
    has_title: bool = False


def plan_pages(
    row_count: int, *, page_height: float,
    table_top: float = PDF_TABLE_TOP, margin: float = PDF_MARGIN,
) -> list[PagePlan]:
    """Place header, rows and footer onto pages. Pure arithmetic, no drawing."""
    bottom = page_height - margin
    pages = [PagePlan(header_y=table_top, has_title=True)]
    y = table_top + PDF_HEADER_HEIGHT

    for index in range(row_count):
        if y + PDF_ROW_HEIGHT > bottom:
            pages.append(PagePlan(header_y=margin))
            y = margin + PDF_HEADER_HEIGHT
        pages[-1].rows.append(RowPlacement(index=index, y=y, shaded=index % 2 == 0))
        y += PDF_ROW_HEIGHT

    y += PDF_FOOTER_GAP
    if y + PDF_FOOTER_HEIGHT > bottom:
        pages.append(PagePlan())
        y = margin
    pages[-1].footer_y = y
    return pages
