import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# read once when notekeeper.utils.auth_hash is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "dev-secret-for-tests")

from notekeeper.main import create_app  # noqa: E402
from notekeeper.storage.notes_store import NotesStore  # noqa: E402


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def store(tmp_path, clock):
    return NotesStore(tmp_path, clock=clock)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("JWT_EXP_MINUTES", "60")
    monkeypatch.setenv("PURGE_ENABLED", "false")

    with TestClient(create_app()) as c:
        yield c


def login_headers(client, username: str, password: str = "StrongPassw0rd!") -> dict:
    r = client.post("/auth/register", json={"username": username, "password": password})
    assert r.status_code == 201
    r = client.post("/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def alice(client):
    return login_headers(client, "alice")


@pytest.fixture()
def bob(client):
    return login_headers(client, "bob")
