# backend/conftest.py
import pytest


@pytest.fixture(scope="function", autouse=True)
def reset_state():
    """
    Clear every in-memory singleton before and after each test.

    Each test should start with a clean slate.
    """
    from backend.features.admin.service import config_service
    from backend.features.ai.service import ai_service
    from backend.features.domains.service import domain_service
    from backend.features.entries.store import get_memory_store
    from backend.features.grounding.service import grounding_service

    def _clear():
        get_memory_store().clear()
        domain_service.clear()
        grounding_service.clear()
        config_service.reset()
        ai_service.reset()

    _clear()
    yield
    _clear()


@pytest.fixture
def sqlite_url(tmp_path, monkeypatch):
    """Point the database layer at a fresh SQLite file."""
    from backend.core import database

    url = f"sqlite:///{tmp_path / 'compoundverse.db'}"
    monkeypatch.setenv("TEST_DATABASE_URL", url)
    database.dispose_engine()
    database.init_engine(url)
    database.create_all_tables()
    yield url
    database.dispose_engine()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from backend.main import app

    limiter = getattr(app.state, "ai_rate_limiter", None)
    if limiter:
        limiter.reset()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_headers():
    return {"X-User-Id": "user_test"}
