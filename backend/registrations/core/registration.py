"""Registration Record - the immutable record, its normalization and display identity.

Invariants:
    - Registration is frozen: status changes produce a new instance via with_statuses()
    - email is trimmed + lower-cased, every other text field is trimmed
    - registration_date is an ISO-8601 string with a UTC offset, set once at creation
    - make_student_id is the ONLY derivation of the human-facing "AI4B-XXXXXX" id

Design Decisions:
    - Clock and id generator are passed in by the caller: construction stays pure and testable
    - Status fields hold plain strings so hand-edited datasets round-trip unchanged
    - to_row()/from_row() speak the persisted camelCase keys, attributes stay snake_case
"""

import dataclasses
from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from registrations.core.domain_types import (
    COLUMN_ORDER, STATUS_FIELDS, DemoStatus, EnrollmentStatus, PaymentStatus,
    RecordId,
)

STUDENT_ID_PREFIX = "AI4B-"
STUDENT_ID_SUFFIX_LENGTH = 6

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


# ─── Normalization ───────────────────────────────────────────────

def normalize_text(value: str) -> str:
    return str(value).strip()


def normalize_email(value: str) -> str:
    return str(value).strip().lower()


def normalize_phone(value: str) -> str:
    return str(value).strip()


def make_student_id(record_id: str) -> str:
    """Human-facing id: prefix + last 6 chars of the internal id, upper-cased."""
    return f"{STUDENT_ID_PREFIX}{str(record_id)[-STUDENT_ID_SUFFIX_LENGTH:].upper()}"


def parse_timestamp(value: str) -> datetime:
    """Parse a persisted ISO timestamp. Unparseable values sort as oldest."""
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _cell_to_text(value: Any) -> str:
    """Dataset cells may come back typed (e.g. a phone retyped as a number)."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return str(value)


def _status_text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class NewRegistration:
    """Inbound create payload, already validated but not yet normalized."""
    full_name: str
    email: str
    phone: str
    board: str
    class_completed: str


@dataclass(frozen=True)
class Registration:
    """One student's registration entry. Field order mirrors COLUMN_ORDER."""
    id: RecordId
    full_name: str
    email: str
    phone: str
    board: str
    class_completed: str
    demo_status: str
    enrollment_status: str
    payment_status: str
    registration_date: str

    @property
    def student_id(self) -> str:
        return make_student_id(self.id)

    @property
    def registered_at(self) -> datetime:
        return parse_timestamp(self.registration_date)

    def with_statuses(self, fields: Mapping[str, Any]) -> "Registration":
        """Apply the recognized status fields present in `fields`; ignore the rest.

        Keys may be attribute names (demo_status) or persisted keys (demoStatus).
        """
        changes = {}
        for name, key in STATUS_FIELDS.items():
            value = fields.get(name, fields.get(key))
            if value is not None:
                changes[name] = _status_text(value)
        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def to_row(self) -> dict[str, str]:
        """Persisted mapping, keys in COLUMN_ORDER."""
        values = dataclasses.astuple(self)
        return dict(zip(COLUMN_ORDER, values))

    def to_public(self) -> dict[str, str]:
        """Outbound shape: persisted fields plus the derived studentId."""
        row = self.to_row()
        row["studentId"] = self.student_id
        return row

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Registration":
        values = [_cell_to_text(row.get(key)) for key in COLUMN_ORDER]
        return cls(*values)


def build_registration(
    new: NewRegistration, *, record_id: RecordId, registered_at: datetime,
) -> Registration:
    """Normalize a create payload and assign defaults. Pure."""
    if registered_at.tzinfo is None:
        registered_at = registered_at.replace(tzinfo=timezone.utc)
    return Registration(
        id=record_id,
        full_name=normalize_text(new.full_name),
        email=normalize_email(new.email),
        phone=normalize_phone(new.phone),
        board=normalize_text(new.board),
        class_completed=normalize_text(new.class_completed),
        demo_status=DemoStatus.REGISTERED.value,
        enrollment_status=EnrollmentStatus.NOT_ENROLLED.value,
        payment_status=PaymentStatus.NOT_PAID.value,
        registration_date=registered_at.isoformat(),
    )


def find_duplicate(
    records: Sequence[Registration],
    email: str, phone: str,
) -> tuple[Registration, str] | None:
    """First record sharing the normalized email or phone, with the conflicting field.

    An empty lookup value never matches. Email is compared before phone.
    """
    email_key = normalize_email(email or "")
    phone_key = normalize_phone(phone or "")
    for record in records:
        if email_key and record.email == email_key:
            return record, "email"
        if phone_key and record.phone == phone_key:
            return record, "phone"
    return None
