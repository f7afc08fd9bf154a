from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from visitdesk.config import Settings
from visitdesk.main import create_app
from visitdesk.storage import MemoryStorage
from visitdesk.storage.sql import SqlStorage


class FakeClock:
    """Wall clock the tests move by hand. Each read advances one millisecond so
    entries written back to back still get distinct, increasing timestamps."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(milliseconds=1)
        return current

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 17, 10, 0, 0))


@pytest.fixture(params=["memory", "sql"])
def storage(request, clock):
    if request.param == "memory":
        store = MemoryStorage(clock=clock)
    else:
        store = SqlStorage("sqlite://", clock=clock)
    yield store
    store.close()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        storage_backend="memory",
        session_secret_key="test-secret",
        mailgun_api_key="",
        mailgun_domain="",
        sendgrid_api_key="",
        seed_sample_visitors=False,
    )


@pytest.fixture
def app_storage(clock):
    return MemoryStorage(clock=clock)


@pytest.fixture
def client(settings, app_storage):
    app = create_app(settings, storage=app_storage)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    r = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert r.status_code == 200, r.text
    return client


@pytest.fixture
def sign_in(client):
    def _sign_in(name="Jane Doe", host="Sarah Johnson", reason="meeting", **extra):
        body = {"name": name, "hostName": host, "visitReason": reason, **extra}
        r = client.post("/api/visitors/signin", json=body)
        assert r.status_code == 200, r.text
        return r.json()

    return _sign_in
