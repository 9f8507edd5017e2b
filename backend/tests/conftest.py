"""Root conftest - shared test configuration and record factories."""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Ensure tests never pick up a real admin secret or dataset location
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("DATASET_PATH", "test-data/registrations.xlsx")

from registrations.core.registration import NewRegistration, Registration  # noqa: E402

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_record():
    """Factory for stored records; n drives unique id/email/phone/date."""

    def _make(n: int = 0, **overrides) -> Registration:
        fields = {
            "id": f"00000000-0000-4000-8000-{n:012d}",
            "full_name": f"Student {n}",
            "email": f"student{n}@example.com",
            "phone": f"9{n:09d}",
            "board": "CBSE",
            "class_completed": "Secondary",
            "demo_status": "Registered",
            "enrollment_status": "Not Enrolled",
            "payment_status": "Not Paid",
            "registration_date": (BASE_TIME + timedelta(minutes=n)).isoformat(),
        }
        fields.update(overrides)
        return Registration(**fields)

    return _make


@pytest.fixture
def make_new():
    """Factory for create payloads with distinct email/phone per n."""

    def _make(n: int = 0, **overrides) -> NewRegistration:
        fields = {
            "full_name": f"Student {n}",
            "email": f"student{n}@example.com",
            "phone": f"8{n:09d}",
            "board": "ICSE",
            "class_completed": "Higher Secondary",
        }
        fields.update(overrides)
        return NewRegistration(**fields)

    return _make
