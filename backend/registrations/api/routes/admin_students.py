"""Admin Students - list, stats, status edits and deletion.

Invariants:
    - Every route requires a valid admin bearer token
    - Listing returns {data, pagination}; each record carries the derived studentId
    - Stats always cover the full unfiltered dataset
    - Empty status query parameters impose no filter
"""

import logging

from fastapi import APIRouter, Depends, Query

from registrations.api.dependencies import get_record_store, require_admin
from registrations.config import Settings, get_settings
from registrations.core.query import RecordQuery
from registrations.core.repository_protocols import RegistrationRepository
from registrations.schemas.registration import StatusUpdate

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin", tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/students")
async def list_students(
    search: str | None = Query(None, max_length=200),
    demo_status: str | None = Query(None, alias="demoStatus"),
    enrollment_status: str | None = Query(None, alias="enrollmentStatus"),
    payment_status: str | None = Query(None, alias="paymentStatus"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    store: RegistrationRepository = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
):
    """Filtered, newest-first, paginated listing."""
    result = store.list_records(RecordQuery(
        search=search or None,
        demo_status=demo_status or None,
        enrollment_status=enrollment_status or None,
        payment_status=payment_status or None,
        page=page,
        limit=limit or settings.default_page_limit,
    ))
    return {
        "success": True,
        "data": [r.to_public() for r in result.data],
        "pagination": result.pagination(),
    }


@router.get("/stats")
async def get_stats(store: RegistrationRepository = Depends(get_record_store)):
    """Status breakdown over all registrations."""
    return store.stats()


@router.patch("/students/{record_id}")
async def update_student_status(
    record_id: str,
    body: StatusUpdate,
    store: RegistrationRepository = Depends(get_record_store),
):
    """Change demo/enrollment/payment status; other fields are write-once."""
    updated = await store.update_status(record_id, body.changed_fields())
    return {
        "success": True,
        "message": "Status updated.",
        "data": updated.to_public(),
    }


@router.delete("/students/{record_id}")
async def delete_student(
    record_id: str,
    store: RegistrationRepository = Depends(get_record_store),
):
    """Permanently delete a registration."""
    await store.delete_by_id(record_id)
    return {"success": True, "message": "Student record deleted."}
