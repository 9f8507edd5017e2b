"""Public registration routes - create, conflicts, validation and the live duplicate check."""

import asyncio


async def test_register_returns_201_with_student_id(client, form, store):
    resp = await client.post("/api/register", json=form(1, email=" Student1@Example.com "))
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["studentId"].startswith("AI4B-")
    assert len(body["studentId"]) == len("AI4B-") + 6
    assert body["data"]["email"] == "student1@example.com"
    assert body["data"]["demoStatus"] == "Registered"
    assert "phone" not in body["data"]
    assert store.record_count == 1


async def test_duplicate_email_returns_409(client, form, store):
    await client.post("/api/register", json=form(1))
    resp = await client.post(
        "/api/register", json=form(2, email="STUDENT1@example.com"),
    )
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "DUPLICATE_REGISTRATION"
    assert error["field"] == "email"
    assert error["message"] == "A student with this email is already registered."
    assert store.record_count == 1


async def test_duplicate_phone_returns_409(client, form):
    await client.post("/api/register", json=form(1))
    resp = await client.post("/api/register", json=form(2, phone="9000000001"))
    assert resp.status_code == 409
    assert resp.json()["error"]["field"] == "phone"


async def test_invalid_payload_returns_400_with_field_details(client, form, store):
    resp = await client.post("/api/register", json=form(1, phone="12345"))
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in error["details"]] == ["phone"]
    assert store.record_count == 0


async def test_concurrent_same_phone_submissions_admit_one(client, form, store):
    responses = await asyncio.gather(*(
        client.post("/api/register", json=form(n, phone="9111111111"))
        for n in range(5)
    ))
    codes = sorted(r.status_code for r in responses)
    assert codes == [201, 409, 409, 409, 409]
    assert store.record_count == 1


async def test_check_reports_existence(client, form):
    await client.post("/api/register", json=form(1))

    hit = await client.get("/api/register/check", params={"email": "STUDENT1@example.com"})
    miss = await client.get("/api/register/check", params={"phone": "9999999999"})

    assert hit.json() == {"success": True, "exists": True}
    assert miss.json() == {"success": True, "exists": False}


async def test_check_without_email_or_phone_is_rejected(client):
    resp = await client.get("/api/register/check")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
