"""PDF Export - paginated, printable registrations report drawn with reportlab.

Invariants:
    - A4 landscape, 30pt margins; title and subtitle on the first page only
    - Every page with rows starts with the styled header row (dark fill, white bold text)
    - Even-indexed rows are shaded; every row is bordered
    - Footer caption is drawn once, at the end of the document (plan_pages decides where)
    - Any failure raises ExportError; no partial document is returned

Design Decisions:
    - Drawing follows the page plan from core/report_layout.py verbatim; this module
      only converts top-down y to reportlab's bottom-up coordinates
    - Cell text clipped to column width with an ellipsis, one line per cell
    - Base-14 Helvetica by default; it has no glyphs outside Latin-1, so names in
      other scripts need a TrueType font configured via report_font_path
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Sequence

from reportlab.lib.colors import HexColor, white
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfbase.pdfmetrics import registerFont, stringWidth
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas

from registrations.core.errors import ExportError
from registrations.core.registration import Registration
from registrations.core.report_layout import (
    PDF_COLUMNS, PDF_FONT_SIZE, PDF_FOOTER_SIZE, PDF_HEADER_HEIGHT, PDF_MARGIN,
    PDF_ROW_HEIGHT, PDF_SUBTITLE_SIZE, PDF_SUBTITLE_Y, PDF_TITLE_SIZE,
    PDF_TITLE_Y, REPORT_FOOTER, REPORT_TITLE, PagePlan, export_order, pdf_cells,
    plan_pages, report_subtitle,
)

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

PAGE_SIZE = landscape(A4)
HEADER_FILL = HexColor("#1e293b")
ROW_SHADE = HexColor("#f8fafc")
ROW_TEXT = HexColor("#334155")
ROW_BORDER = HexColor("#e2e8f0")
SUBTITLE_TEXT = HexColor("#64748b")
FOOTER_TEXT = HexColor("#94a3b8")
CELL_PADDING = 3.0
ELLIPSIS = "…"


@dataclass(frozen=True)
class ReportFonts:
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"


DEFAULT_FONTS = ReportFonts()
REGULAR_FONT = DEFAULT_FONTS.regular
BOLD_FONT = DEFAULT_FONTS.bold


@lru_cache(maxsize=8)
def load_report_fonts(
    regular_path: Path | None = None, bold_path: Path | None = None,
) -> ReportFonts:
    """Register TrueType fonts with reportlab once; None keeps Helvetica."""
    if regular_path is None:
        return DEFAULT_FONTS
    regular = f"Report-{Path(regular_path).stem}"
    registerFont(TTFont(regular, str(regular_path)))
    if bold_path is None:
        return ReportFonts(regular=regular, bold=regular)
    bold = f"Report-{Path(bold_path).stem}"
    registerFont(TTFont(bold, str(bold_path)))
    return ReportFonts(regular=regular, bold=bold)


def clip_text(text: str, width: float, font: str, size: float) -> str:
    """Fit text into width, replacing the overflow with an ellipsis."""
    if stringWidth(text, font, size) <= width:
        return text
    while text and stringWidth(text + ELLIPSIS, font, size) > width:
        text = text[:-1]
    return text + ELLIPSIS if text else ""


class _ReportCanvas:
    """Thin drawing helper over reportlab's canvas using top-down y."""

    def __init__(self, canvas: Canvas, fonts: ReportFonts):
        self._c = canvas
        self.fonts = fonts
        self._width, self._height = PAGE_SIZE
        self._table_width = sum(col.width for col in PDF_COLUMNS)

    def _flip(self, y: float) -> float:
        return self._height - y

    def centered(self, text: str, y: float, font: str, size: float, color) -> None:
        self._c.setFont(font, size)
        self._c.setFillColor(color)
        self._c.drawCentredString(self._width / 2, self._flip(y + size), text)

    def row(self, cells: list[str], y: float, *, header: bool, shaded: bool = False) -> None:
        height = PDF_HEADER_HEIGHT if header else PDF_ROW_HEIGHT
        bottom = self._flip(y + height)
        if header or shaded:
            self._c.setFillColor(HEADER_FILL if header else ROW_SHADE)
            self._c.rect(PDF_MARGIN, bottom, self._table_width, height, stroke=0, fill=1)

        font = self.fonts.bold if header else self.fonts.regular
        self._c.setFont(font, PDF_FONT_SIZE)
        self._c.setFillColor(white if header else ROW_TEXT)
        baseline = bottom + (height - PDF_FONT_SIZE) / 2 + 1.5
        x = PDF_MARGIN
        for cell, column in zip(cells, PDF_COLUMNS):
            text = clip_text(
                cell, column.width - 2 * CELL_PADDING, font, PDF_FONT_SIZE,
            )
            self._c.drawString(x + CELL_PADDING, baseline, text)
            x += column.width

        self._c.setStrokeColor(ROW_BORDER)
        self._c.rect(PDF_MARGIN, bottom, self._table_width, height, stroke=1, fill=0)

    def next_page(self) -> None:
        self._c.showPage()


def _draw_page(
    pen: _ReportCanvas, page: PagePlan, ordered: list[Registration],
    subtitle: str,
) -> None:
    fonts = pen.fonts
    if page.has_title:
        pen.centered(REPORT_TITLE, PDF_TITLE_Y, fonts.bold, PDF_TITLE_SIZE, ROW_TEXT)
        pen.centered(subtitle, PDF_SUBTITLE_Y, fonts.regular, PDF_SUBTITLE_SIZE, SUBTITLE_TEXT)
    if page.header_y is not None:
        pen.row([col.label for col in PDF_COLUMNS], page.header_y, header=True)
    for placement in page.rows:
        record = ordered[placement.index]
        pen.row(
            pdf_cells(placement.index, record), placement.y,
            header=False, shaded=placement.shaded,
        )
    if page.footer_y is not None:
        pen.centered(REPORT_FOOTER, page.footer_y, fonts.regular, PDF_FOOTER_SIZE, FOOTER_TEXT)


def render_pdf(
    records: Sequence[Registration], zone: tzinfo, generated_at: datetime,
    font_path: Path | None = None, bold_font_path: Path | None = None,
) -> bytes:
    """Render the snapshot to PDF bytes."""
    try:
        fonts = load_report_fonts(font_path, bold_font_path)
        ordered = export_order(records)
        pages = plan_pages(len(ordered), page_height=PAGE_SIZE[1])
        subtitle = report_subtitle(generated_at, len(ordered), zone)

        buffer = io.BytesIO()
        canvas = Canvas(buffer, pagesize=PAGE_SIZE)
        canvas.setTitle(REPORT_TITLE)
        pen = _ReportCanvas(canvas, fonts)
        for number, page in enumerate(pages):
            if number:
                pen.next_page()
            _draw_page(pen, page, ordered, subtitle)
        canvas.save()
    except Exception as e:
        logger.error(
            f"PDF export failed: {e}",
            extra={"export_format": "pdf"}, exc_info=True,
        )
        raise ExportError("pdf", str(e)) from e
    return buffer.getvalue()
