"""Domain Types - enums and identity types for registration records.

Invariants:
    - Enum values are the exact strings persisted in the dataset and sent over the wire
    - COLUMN_ORDER is the persisted header contract, not just display order
    - STATUS_FIELDS are the only attributes that may change after creation

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - Records keep plain strings for statuses; enums validate at the API boundary only
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Board(str, Enum):
    """School board the student studied under."""
    ICSE = "ICSE"
    CBSE = "CBSE"
    WEST_BENGAL = "West Bengal"
    OTHERS = "Others"


class ClassCompleted(str, Enum):
    """Highest class the student has completed."""
    SECONDARY = "Secondary"
    HIGHER_SECONDARY = "Higher Secondary"
    OTHERS = "Others"


class DemoStatus(str, Enum):
    """Free demo class attendance."""
    REGISTERED = "Registered"
    ATTENDED = "Attended"
    NOT_ATTENDED = "Not Attended"


class EnrollmentStatus(str, Enum):
    ENROLLED = "Enrolled"
    NOT_ENROLLED = "Not Enrolled"


class PaymentStatus(str, Enum):
    FULL_PAID = "Full Paid"
    REGISTRATION_PAID = "Registration Paid"
    NOT_PAID = "Not Paid"


# ─── Persisted Format ────────────────────────────────────────────

COLUMN_ORDER: tuple[str, ...] = (
    "id", "fullName", "email", "phone", "board", "classCompleted",
    "demoStatus", "enrollmentStatus", "paymentStatus", "registrationDate",
)

# attribute name -> persisted camelCase key
STATUS_FIELDS: dict[str, str] = {
    "demo_status": "demoStatus",
    "enrollment_status": "enrollmentStatus",
    "payment_status": "paymentStatus",
}
