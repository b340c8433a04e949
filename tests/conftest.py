"""Shared test fixtures for all test groups."""

import pytest
from fastapi.testclient import TestClient

from alteran.core.auth import SESSION_COOKIE, create_session_token
from alteran.core.config import get_settings
from alteran.web.page_cache import reset_page_cache

TEST_AUTH_SECRET = "test-auth-secret"
TEST_ADMIN_PASSWORD = "correct horse battery staple"


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point every setting at per-test temporary resources.

    DEBUG is on so the session cookie is not marked Secure; the test client
    talks plain http.
    """
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("AUTH_SECRET", TEST_AUTH_SECRET)
    monkeypatch.setenv("ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    monkeypatch.setenv("OPENROUTER_API_KEY", "")
    monkeypatch.setenv("GITHUB_TOKEN", "")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")

    get_settings.cache_clear()
    reset_page_cache()
    yield get_settings()
    get_settings.cache_clear()
    reset_page_cache()


@pytest.fixture
async def session_factory(test_settings):
    """Session factory over a fresh SQLite file, bound to the test's event loop."""
    import alteran.db.base as db_mod
    from alteran.db import close_db, get_session_factory, init_db

    db_mod._engine = None
    db_mod._session_factory = None
    await init_db(test_settings.database_url)
    yield get_session_factory()
    await close_db()


@pytest.fixture
def admin_token(test_settings) -> str:
    return create_session_token(test_settings.auth_secret)


@pytest.fixture
def api_client(test_settings):
    """Full application test client.

    The app lifespan runs init_db inside the TestClient's own event loop, so
    the global engine is reset first.
    """
    import alteran.db.base as db_mod
    from alteran.main import create_app

    db_mod._engine = None
    db_mod._session_factory = None

    with TestClient(create_app(), follow_redirects=False) as client:
        yield client


@pytest.fixture
def admin_client(api_client, admin_token):
    """Test client carrying a valid admin session cookie."""
    api_client.cookies.set(SESSION_COOKIE, admin_token)
    return api_client
