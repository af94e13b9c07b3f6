# conftest.py
# -------------------------------------------------------------------------------------
# File: conftest.py (project root)
# Purpose: shared pytest fixtures for the API tests.
#          - Every test gets its own app built by create_app() on an in-memory
#            SQLite database (StaticPool), with tables created at startup.
#          - `client` is a FastAPI TestClient that keeps cookies between calls.
#          - Prints how many tests were collected and the total suite time.
# -------------------------------------------------------------------------------------

import time

import pytest
from fastapi.testclient import TestClient

from invitation_service.config import Settings
from invitation_service.main import create_app

_session_start_monotonic: float = 0.0


def _fmt_hhmmss(elapsed: float) -> str:
    total = int(elapsed)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"


# ===========================
# Run lifecycle hooks
# ===========================
def pytest_sessionstart(session):
    global _session_start_monotonic
    _session_start_monotonic = time.monotonic()


def pytest_collection_finish(session):
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    msg = f"📋 Collected {len(session.items)} tests."
    if tr:
        tr.write_line(msg)
    else:
        print(msg)


def pytest_sessionfinish(session, exitstatus):
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    line = f"🟢 Suite finished. Total time: {_fmt_hhmmss(time.monotonic() - _session_start_monotonic)}"
    if tr:
        tr.write_line(line)
    else:
        print("\n" + line)


# ===============================
# Fixtures
# ===============================
@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        auto_create_tables=True,
        jwt_secret="test-secret",
        link_base="https://wedding.test",
        login_rl_max=3,
        login_rl_window=60,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    """A session on the same in-memory database the client talks to."""
    session = app.state.database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_invitation(client):
    """Creates an invitation through the API and returns the 201 body."""

    def _make(**overrides):
        body = {"name": "Budi Santoso", "type": "digital", "qty": 2}
        body.update(overrides)
        response = client.post("/api/invitations", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_category(client):
    def _make(name="Keluarga"):
        response = client.post("/api/categories", json={"name": name})
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make
