"""Query Engine - search, filter, order and paginate over a record snapshot.

Invariants:
    - search runs first (case-insensitive substring over full_name, email, phone),
      then exact-match status filters in order demo -> enrollment -> payment
    - Empty/None filter values impose no constraint; all filters are conjunctive
    - Ordering is registration date descending; equal dates keep insertion order
    - Pages are 1-indexed; a page past the end yields an empty slice, never an error
    - total and pages describe the filtered set before pagination

Design Decisions:
    - Pure function over an immutable snapshot: the store never lends out mutable state
    - sort_newest_first shared with the export renderers so both use one ordering
"""

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from registrations.core.errors import ValidationError
from registrations.core.registration import Registration

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20


@dataclass(frozen=True)
class RecordQuery:
    """Admin listing parameters."""
    search: str | None = None
    demo_status: str | None = None
    enrollment_status: str | None = None
    payment_status: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class QueryResult:
    data: tuple[Registration, ...]
    total: int
    page: int
    limit: int
    pages: int

    def pagination(self) -> dict:
        return {
            "total": self.total, "page": self.page,
            "limit": self.limit, "pages": self.pages,
        }


def sort_newest_first(records: Iterable[Registration]) -> list[Registration]:
    """Stable sort by registration date, most recent first."""
    return sorted(records, key=lambda r: r.registered_at, reverse=True)


def matches_search(record: Registration, search: str) -> bool:
    needle = search.lower()
    return (
        needle in record.full_name.lower()
        or needle in record.email.lower()
        or needle in record.phone.lower()
    )


def filter_records(
    records: Sequence[Registration], query: RecordQuery,
) -> list[Registration]:
    """Apply search then status filters. Order of input is preserved."""
    selected = list(records)
    if query.search:
        selected = [r for r in selected if matches_search(r, query.search)]
    if query.demo_status:
        selected = [r for r in selected if r.demo_status == query.demo_status]
    if query.enrollment_status:
        selected = [
            r for r in selected if r.enrollment_status == query.enrollment_status
        ]
    if query.payment_status:
        selected = [r for r in selected if r.payment_status == query.payment_status]
    return selected


def query_records(
    records: Sequence[Registration], query: RecordQuery | None = None,
) -> QueryResult:
    """Filter, order and paginate a snapshot. Pure, no IO."""
    query = query or RecordQuery()
    if query.page < 1:
        raise ValidationError("page must be a positive integer", "page")
    if query.limit < 1:
        raise ValidationError("limit must be a positive integer", "limit")

    ordered = sort_newest_first(filter_records(records, query))
    total = len(ordered)
    start = (query.page - 1) * query.limit
    return QueryResult(
        data=tuple(ordered[start:start + query.limit]),
        total=total,
        page=query.page,
        limit=query.limit,
        pages=math.ceil(total / query.limit),
    )
