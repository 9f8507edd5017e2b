"""API Rate Limiting - fixed-window request budget per client address on /api.

Invariants:
    - One budget per client host, shared by every /api route
    - A request over budget is rejected with RateLimitError (429) before the route runs
    - Counters live in process memory; a restart starts every window afresh

Design Decisions:
    - limits (the engine behind slowapi) used directly behind a FastAPI dependency,
      so routes need no decorator and no Request parameter
"""

from limits import RateLimitItem, parse
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter

RATE_LIMIT_NAMESPACE = "api"


class ApiRateLimiter:
    """Per-client request counter for the whole API surface."""

    def __init__(self, rate: str):
        self.rate: RateLimitItem = parse(rate)
        self._limiter = FixedWindowRateLimiter(MemoryStorage())

    def hit(self, client: str) -> bool:
        """Count one request; False once the client is over budget."""
        return self._limiter.hit(self.rate, RATE_LIMIT_NAMESPACE, client)
