"""Admin export routes - attachment responses and failure handling."""

import io
import re
from datetime import datetime, timezone

from openpyxl import load_workbook

from registrations.api.routes import admin_exports
from registrations.api.routes.admin_exports import export_filename
from registrations.core.errors import ExportError


def test_export_filename_uses_date_stamp():
    now = datetime(2026, 10, 17, 23, 59, tzinfo=timezone.utc)
    assert export_filename("AI4Biz_Students", "pdf", now) == "AI4Biz_Students_2026-10-17.pdf"


async def test_exports_require_token(client):
    for fmt in ("xlsx", "pdf"):
        resp = await client.get(f"/api/admin/download/{fmt}")
        assert resp.status_code == 401


async def test_xlsx_download(client, admin_headers, form):
    await client.post("/api/register", json=form(1))
    resp = await client.get("/api/admin/download/xlsx", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    assert re.fullmatch(
        r'attachment; filename="AI4Biz_Students_\d{4}-\d{2}-\d{2}\.xlsx"',
        resp.headers["content-disposition"],
    )
    ws = load_workbook(io.BytesIO(resp.content)).active
    assert ws.max_row == 2
    assert ws["C2"].value == "student1@example.com"


async def test_pdf_download(client, admin_headers, form):
    await client.post("/api/register", json=form(1))
    resp = await client.get("/api/admin/download/pdf", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.headers["content-disposition"].endswith('.pdf"')
    assert resp.content.startswith(b"%PDF")


async def test_render_failure_returns_500_without_partial_body(
    client, admin_headers, monkeypatch,
):
    def broken(records, zone, generated_at, *fonts):
        raise ExportError("pdf", "font missing")

    monkeypatch.setattr(admin_exports, "render_pdf", broken)
    resp = await client.get("/api/admin/download/pdf", headers=admin_headers)

    assert resp.status_code == 500
    error = resp.json()["error"]
    assert error["code"] == "EXPORT_ERROR"
    assert "font missing" not in error["message"]
