"""Registration Portal API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RegistrationPortalError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every API route shares one per-client request budget (enforce_rate_limit)
    - Exactly one RecordStore per process, built and opened in the lifespan,
      exposed on app.state and injected into routes via get_record_store

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Static site mounted AFTER API routes so /api/* takes precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from registrations.api.dependencies import enforce_rate_limit
from registrations.api.error_handlers import register_error_handlers
from registrations.api.rate_limit import ApiRateLimiter
from registrations.api.routes import admin_exports, admin_students, health, register
from registrations.config import get_settings
from registrations.infrastructure.observability import setup_logging
from registrations.infrastructure.record_store import RecordStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = RecordStore(settings.dataset_path, settings.dataset_sheet)
    await store.open()
    app.state.record_store = store
    logger.info(
        "Registration portal API started",
        extra={"path": str(store.path), "record_count": store.record_count},
    )
    yield
    app.state.record_store = None
    logger.info("Registration portal API shutting down")


app = FastAPI(
    title="Student Registration Portal API", version="1.0.0", lifespan=lifespan,
    dependencies=[Depends(enforce_rate_limit)],
)

settings = get_settings()
app.state.rate_limiter = (
    ApiRateLimiter(settings.rate_limit) if settings.rate_limit_enabled else None
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(register.router)
app.include_router(admin_students.router)
app.include_router(admin_exports.router)

register_error_handlers(app)

if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
