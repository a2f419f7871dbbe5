"""Shared fixtures: the app on a throwaway SQLite database."""

import os
import tempfile
import uuid

# Setup environment for testing (before any safelink import)
os.environ["SAFELINK_DATA_DIR"] = tempfile.mkdtemp()
os.environ["SAFELINK_DB_PATH"] = os.path.join(os.environ["SAFELINK_DATA_DIR"], "test.db")
os.environ["SAFELINK_PUSH_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def client():
    from safelink.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(client):
    """Register a fresh device and return its user JSON."""

    def _make(device_name: str = "Test Phone", **extra) -> dict:
        body = {"deviceId": f"dev-{uuid.uuid4().hex}", "deviceName": device_name, **extra}
        r = client.post("/api/users/get-or-create", json=body)
        assert r.status_code == 200, r.text
        return r.json()

    return _make


@pytest.fixture
def make_code(client):
    """Generate a pairing code for an owner and return the code string."""

    def _make(owner_id: str, **extra) -> str:
        r = client.post("/api/pairing/generate", json={"ownerId": owner_id, **extra})
        assert r.status_code == 200, r.text
        return r.json()["code"]

    return _make


@pytest.fixture
def db_session(client):
    from sqlmodel import Session
    from safelink.database import engine

    with Session(engine) as session:
        yield session
