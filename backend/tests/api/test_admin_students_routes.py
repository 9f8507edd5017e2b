"""Admin student routes - auth, listing, stats, status edits and deletion."""

import pytest


@pytest.fixture
async def seeded(client, form):
    created = []
    for n in range(1, 4):
        resp = await client.post("/api/register", json=form(n))
        created.append(resp.json())
    return created


# --- auth ---------------------------------------------------------------------

@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer wrong-token"},
    {"Authorization": "test-admin-token"},
])
async def test_admin_routes_require_token(client, headers):
    resp = await client.get("/api/admin/students", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"


# --- listing ------------------------------------------------------------------

async def test_list_is_newest_first_with_pagination(client, admin_headers, seeded):
    resp = await client.get(
        "/api/admin/students", params={"limit": 2}, headers=admin_headers,
    )
    body = resp.json()
    assert resp.status_code == 200
    assert [r["fullName"] for r in body["data"]] == ["Student 3", "Student 2"]
    assert all(r["studentId"].startswith("AI4B-") for r in body["data"])
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}


async def test_list_search_and_status_filter(client, admin_headers, seeded, store):
    target = store.snapshot()[0]
    await store.update_status(target.id, {"demo_status": "Attended"})

    resp = await client.get(
        "/api/admin/students",
        params={"search": "student", "demoStatus": "Attended", "paymentStatus": ""},
        headers=admin_headers,
    )
    data = resp.json()["data"]
    assert [r["id"] for r in data] == [target.id]


async def test_list_page_zero_rejected(client, admin_headers):
    resp = await client.get(
        "/api/admin/students", params={"page": 0}, headers=admin_headers,
    )
    assert resp.status_code == 400


async def test_stats_cover_full_dataset(client, admin_headers, seeded):
    resp = await client.get("/api/admin/stats", headers=admin_headers)
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["total"] == 3
    assert stats["demoStatus"] == {"Registered": 3}
    assert stats["paymentStatus"] == {"Not Paid": 3}


# --- status edits -------------------------------------------------------------

async def test_patch_updates_only_statuses(client, admin_headers, seeded, store):
    target = store.snapshot()[0]
    resp = await client.patch(
        f"/api/admin/students/{target.id}",
        json={"paymentStatus": "Full Paid", "email": "hacker@example.com"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["paymentStatus"] == "Full Paid"
    assert data["email"] == target.email
    assert store.snapshot()[0].payment_status == "Full Paid"


async def test_patch_invalid_status_rejected(client, admin_headers, seeded, store):
    target = store.snapshot()[0]
    resp = await client.patch(
        f"/api/admin/students/{target.id}",
        json={"demoStatus": "Skipped"}, headers=admin_headers,
    )
    assert resp.status_code == 400
    assert store.snapshot()[0] == target


async def test_patch_unknown_id_returns_404(client, admin_headers):
    resp = await client.patch(
        "/api/admin/students/missing",
        json={"demoStatus": "Attended"}, headers=admin_headers,
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Student not found."


# --- deletion -----------------------------------------------------------------

async def test_delete_removes_record(client, admin_headers, seeded, store):
    target = store.snapshot()[0]
    resp = await client.delete(
        f"/api/admin/students/{target.id}", headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert target not in store.snapshot()
    assert store.record_count == 2


async def test_delete_unknown_id_returns_404(client, admin_headers, seeded, store):
    resp = await client.delete("/api/admin/students/missing", headers=admin_headers)
    assert resp.status_code == 404
    assert store.record_count == 3
