"""Registration Stats - status breakdown counts over the full dataset.

Invariants:
    - Input is the full unfiltered snapshot, never a paginated query result
    - Only observed values appear as keys; absent values are NOT reported as 0
    - Keys are the values exactly as stored (unknown values are counted too)
"""

from collections import Counter
from typing import Sequence

from registrations.core.registration import Registration


def compute_stats(records: Sequence[Registration]) -> dict:
    """Compute status breakdowns. Pure, no IO."""
    return {
        "total": len(records),
        "demoStatus": dict(Counter(r.demo_status for r in records)),
        "enrollmentStatus": dict(Counter(r.enrollment_status for r in records)),
        "paymentStatus": dict(Counter(r.payment_status for r in records)),
    }
