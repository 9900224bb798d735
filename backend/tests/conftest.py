"""Pytest fixtures — a file-backed SQLite database per test."""
import pytest
from fastapi.testclient import TestClient

from health_tracker.config import Settings
from health_tracker.main import create_app


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file for each test."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture(scope="function")
def client(settings):
    """TestClient over an app whose startup opens the per-test database."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def db(client):
    """A session on the same database the app is using."""
    session = client.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Helpers: register users, build auth headers, create records via the API
# ---------------------------------------------------------------------------
def register_user(client: TestClient, name: str = "Test User", email: str = "test@example.com",
                  password: str = "password123") -> dict:
    """Helper — POST /api/auth/register and return response JSON (token + user)."""
    resp = client.post("/api/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_and_auth(client: TestClient, name: str = "Test User", email: str = "test@example.com") -> tuple:
    """Register a user and return (user_json, headers)."""
    data = register_user(client, name=name, email=email)
    return data["user"], auth_headers(data["token"])


def create_alert(client: TestClient, headers: dict, title: str = "Test Alert", **fields) -> dict:
    """Helper — POST /api/alerts and return the created alert."""
    resp = client.post("/api/alerts", json={"title": title, **fields}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["alert"]


def create_diagnostic_test(client: TestClient, headers: dict, name: str = "CBC",
                           date: str = "2026-01-15", result: str = "Normal", **fields) -> dict:
    """Helper — POST /api/diagnostic-tests and return the created test."""
    resp = client.post("/api/diagnostic-tests", json={
        "name": name,
        "result": result,
        "date": date,
        **fields,
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["test"]
