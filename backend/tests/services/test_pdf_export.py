"""PDF export - landscape report, paginated with repeated headers."""

import re
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import reportlab

from registrations.core.errors import ExportError
from registrations.services import pdf_export
from registrations.services.pdf_export import (
    BOLD_FONT, DEFAULT_FONTS, ELLIPSIS, REGULAR_FONT, clip_text,
    load_report_fonts, render_pdf,
)

KOLKATA = ZoneInfo("Asia/Kolkata")
GENERATED = datetime(2026, 10, 17, 6, 0, tzinfo=timezone.utc)
PAGE_OBJECT = re.compile(rb"/Type\s*/Page\b")


def _page_count(payload: bytes) -> int:
    return len(PAGE_OBJECT.findall(payload))


def test_empty_dataset_renders_single_page():
    payload = render_pdf([], KOLKATA, GENERATED)
    assert payload.startswith(b"%PDF")
    assert _page_count(payload) == 1


def test_small_dataset_fits_one_page(make_record):
    payload = render_pdf([make_record(n) for n in range(10)], KOLKATA, GENERATED)
    assert _page_count(payload) == 1


def test_large_dataset_spills_onto_more_pages(make_record):
    # 26 rows fit under the title block, 28 on each following page
    payload = render_pdf([make_record(n) for n in range(60)], KOLKATA, GENERATED)
    assert _page_count(payload) == 3


def test_render_failure_raises_export_error(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("layout exploded")

    monkeypatch.setattr(pdf_export, "plan_pages", broken)
    with pytest.raises(ExportError) as exc:
        render_pdf([], KOLKATA, GENERATED)
    assert exc.value.operation == "export_pdf"


# -- clip_text -----------------------------------------------------------------

def test_short_text_untouched():
    assert clip_text("Asha", 100, REGULAR_FONT, 7.5) == "Asha"


def test_long_text_clipped_with_ellipsis():
    text = "a.very.long.email.address.for.testing@example-domain.com"
    clipped = clip_text(text, 60, REGULAR_FONT, 7.5)
    assert clipped.endswith(ELLIPSIS)
    assert len(clipped) < len(text)
    assert text.startswith(clipped[:-1])


def test_no_room_returns_empty():
    assert clip_text("Name", 1, BOLD_FONT, 7.5) == ""


# -- fonts ---------------------------------------------------------------------

BUNDLED_FONTS = Path(reportlab.__file__).parent / "fonts"


def test_default_fonts_are_helvetica():
    assert load_report_fonts() is DEFAULT_FONTS
    assert (DEFAULT_FONTS.regular, DEFAULT_FONTS.bold) == ("Helvetica", "Helvetica-Bold")


def test_truetype_font_is_registered_and_embedded(make_record):
    regular, bold = BUNDLED_FONTS / "Vera.ttf", BUNDLED_FONTS / "VeraBd.ttf"
    fonts = load_report_fonts(regular, bold)
    assert (fonts.regular, fonts.bold) == ("Report-Vera", "Report-VeraBd")

    payload = render_pdf(
        [make_record(1, full_name="Amit Dás")], KOLKATA, GENERATED, regular, bold,
    )
    assert payload.startswith(b"%PDF")
    assert b"/FontFile2" in payload


def test_regular_font_doubles_as_bold():
    fonts = load_report_fonts(BUNDLED_FONTS / "Vera.ttf")
    assert fonts.bold == fonts.regular


def test_missing_font_file_raises_export_error(tmp_path):
    with pytest.raises(ExportError):
        render_pdf([], KOLKATA, GENERATED, tmp_path / "missing.ttf")
