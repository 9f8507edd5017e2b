"""Registration Schemas - boundary validation for the public form and admin edits.

Invariants:
    - Wire keys are camelCase (fullName, classCompleted, demoStatus, ...)
    - Strings are stripped before length/pattern checks
    - fullName 2-100 chars; phone is a 10-digit Indian mobile number (starts 6-9)
    - StatusUpdate ignores unknown keys; absent fields are left untouched

Design Decisions:
    - Enum-typed fields: pydantic rejects values outside the allowed sets
    - Email checked with a light pattern; deliverability is not this service's concern
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from registrations.core.domain_types import (
    Board, ClassCompleted, DemoStatus, EnrollmentStatus, PaymentStatus,
)
from registrations.core.registration import NewRegistration

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^[6-9]\d{9}$"


class RegistrationCreate(BaseModel):
    """Public registration form."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
        str_strip_whitespace=True,
    )

    full_name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=254, pattern=EMAIL_PATTERN)
    phone: str = Field(pattern=PHONE_PATTERN)
    board: Board
    class_completed: ClassCompleted

    def to_new_registration(self) -> NewRegistration:
        return NewRegistration(
            full_name=self.full_name,
            email=self.email,
            phone=self.phone,
            board=self.board.value,
            class_completed=self.class_completed.value,
        )


class StatusUpdate(BaseModel):
    """Admin status edit; only the three status fields are accepted."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )

    demo_status: DemoStatus | None = None
    enrollment_status: EnrollmentStatus | None = None
    payment_status: PaymentStatus | None = None

    def changed_fields(self) -> dict[str, str]:
        """Fields the caller actually sent, as plain strings."""
        return {
            name: value.value
            for name, value in self.model_dump(exclude_none=True).items()
        }
