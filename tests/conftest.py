import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'app' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# settings are read at import time, so configure env before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

DEFAULT_PASSWORD = "secret123"


@pytest.fixture()
def client():
    # lazy import after env configured
    from app.core.database import engine
    from app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
        # a fresh in-memory database for the next test
        test_client.portal.call(engine.dispose)


@pytest.fixture()
def make_user(client):
    """Register a user, log in, and return bearer headers for them."""

    def _make(email="neo@example.com", name="Neo Anderson", password=DEFAULT_PASSWORD):
        body = {"name": name, "email": email, "password": password, "password2": password}
        r = client.post("/api/users/register", json=body)
        assert r.status_code == 201, r.text
        r = client.post("/api/users/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _make


@pytest.fixture()
def auth_header(make_user):
    return make_user()
