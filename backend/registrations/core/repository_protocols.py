"""Boundary Protocols - contract between the HTTP shell and the record store.

Invariants:
    - Routes depend on RegistrationRepository, never on the concrete store class
    - Mutations are async (they hold the write lock across file IO)
    - Reads are sync: they return the currently published immutable snapshot

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
"""

from typing import Any, Mapping, Protocol

from registrations.core.domain_types import RecordId
from registrations.core.query import QueryResult, RecordQuery
from registrations.core.registration import NewRegistration, Registration


class RegistrationRepository(Protocol):
    """Contract for the registration dataset, implemented by infrastructure."""

    @property
    def is_open(self) -> bool: ...

    @property
    def record_count(self) -> int: ...

    async def create(self, new: NewRegistration) -> Registration: ...
    async def update_status(
        self, record_id: RecordId, fields: Mapping[str, Any],
    ) -> Registration: ...
    async def delete_by_id(self, record_id: RecordId) -> bool: ...

    def find_duplicate(self, email: str, phone: str) -> Registration | None: ...
    def list_records(self, query: RecordQuery | None = None) -> QueryResult: ...
    def snapshot(self) -> tuple[Registration, ...]: ...
    def stats(self) -> dict: ...
