"""Route Dependencies - record store injection and admin credential check.

Invariants:
    - Routes obtain the store only through get_record_store (no module-level handle)
    - Admin routes require "Authorization: Bearer <token>" matching settings.admin_token
    - Every route passes enforce_rate_limit first; no limiter on app.state means no limit
"""

import secrets

from fastapi import Depends, Header, Request

from registrations.config import Settings, get_settings
from registrations.core.errors import (
    AuthenticationError, ErrorContext, PersistenceError, RateLimitError,
)
from registrations.core.repository_protocols import RegistrationRepository

BEARER_PREFIX = "Bearer "


def get_record_store(request: Request) -> RegistrationRepository:
    """The store built by the app lifespan."""
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise PersistenceError("open", "record store not initialized")
    return store


def require_admin(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Verify the presented admin credential, reject otherwise."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Unauthorized: No token provided.")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not secrets.compare_digest(token.encode(), settings.admin_token.encode()):
        raise AuthenticationError(
            "Unauthorized: Invalid or expired session. Please log in again.",
        )


def enforce_rate_limit(request: Request) -> None:
    """Reject the request once its client has spent the /api budget."""
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return
    client = request.client.host if request.client else "unknown"
    if not limiter.hit(client):
        raise RateLimitError(ErrorContext(debug_info={"client": client}))
