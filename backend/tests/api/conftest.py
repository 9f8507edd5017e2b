"""API test fixtures - app wired to a temp-dir record store and test settings."""

import pytest
from httpx import ASGITransport, AsyncClient

from registrations.api.rate_limit import ApiRateLimiter
from registrations.config import Settings, get_settings
from registrations.infrastructure.record_store import RecordStore
from registrations.main import app

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        dataset_path=tmp_path / "registrations.xlsx",
        admin_token=ADMIN_TOKEN,
        default_page_limit=20,
    )


@pytest.fixture
async def store(settings):
    s = RecordStore(settings.dataset_path, settings.dataset_sheet)
    await s.open()
    return s


@pytest.fixture
async def client(store, settings):
    app.state.record_store = store
    app.state.rate_limiter = ApiRateLimiter(settings.rate_limit)
    app.dependency_overrides[get_settings] = lambda: settings
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
    app.state.record_store = None


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def form():
    """Valid public form payload factory."""

    def _make(n: int = 0, **overrides) -> dict:
        payload = {
            "fullName": f"Student {n}",
            "email": f"student{n}@example.com",
            "phone": f"9{n:09d}",
            "board": "CBSE",
            "classCompleted": "Secondary",
        }
        payload.update(overrides)
        return payload

    return _make
