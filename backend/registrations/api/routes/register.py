"""Public Registration - form submission and live duplicate check.

Invariants:
    - Body validated by RegistrationCreate before the store is called
    - Duplicate check + insert are atomic inside RecordStore.create (409 on conflict)
    - The check endpoint only reports existence, never the matching record
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from registrations.api.dependencies import get_record_store
from registrations.core.errors import ValidationError
from registrations.core.repository_protocols import RegistrationRepository
from registrations.schemas.registration import RegistrationCreate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/register", tags=["registration"])

SUCCESS_MESSAGE = (
    "You have been successfully registered for the FREE Demo Class! "
    "We will communicate the Demo class date and next steps to your "
    "registered email and mobile number."
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_student(
    body: RegistrationCreate,
    store: RegistrationRepository = Depends(get_record_store),
):
    """Create a registration from the public form."""
    record = await store.create(body.to_new_registration())
    return {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "studentId": record.student_id,
        "data": {
            "fullName": record.full_name,
            "email": record.email,
            "board": record.board,
            "classCompleted": record.class_completed,
            "demoStatus": record.demo_status,
            "registrationDate": record.registration_date,
        },
    }


@router.get("/check")
async def check_existing(
    email: str | None = Query(None, max_length=254),
    phone: str | None = Query(None, max_length=20),
    store: RegistrationRepository = Depends(get_record_store),
):
    """Live "already registered?" check for the form."""
    if not email and not phone:
        raise ValidationError("Provide email or phone to check.", "email")
    match = store.find_duplicate(email or "", phone or "")
    return {"success": True, "exists": match is not None}
