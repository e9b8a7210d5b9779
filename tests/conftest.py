"""
Shared fixtures.

The app runs against a temporary SQLite file, a mongomock session
collection, an in-memory object store and a scripted Google client, so
no Postgres, MongoDB, MinIO or network access is needed.
Run: pytest -v
"""

import os
import sys
import tempfile
from pathlib import Path

# Add project root to Python path (for direct invocation)
sys.path.insert(0, str(Path(__file__).parent.parent))

# Settings are read once at import time, so configure them before importing app
_DB_DIR = tempfile.mkdtemp(prefix="jobboard-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["BCRYPT_SALT_ROUNDS"] = "4"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["SESSION_SECRET_KEY"] = "test-session-secret"
os.environ["FRONTEND_URL"] = "http://frontend.local"
os.environ["FRONTEND_PORT"] = "3000"

import mongomock
import pytest
from fastapi.testclient import TestClient
from starlette.responses import RedirectResponse

from app.core.config import get_settings
from app.core.container import build_services
from app.db.postgres import engine
from app.db.schema import metadata
from app.main import create_app
from app.services.storage_service import StorageError, StorageService

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}
DEFAULT_PASSWORD = "secret123"


class InMemoryStorage(StorageService):
    """Object store double: keeps objects in a dict, can be told to fail."""

    def __init__(self):
        super().__init__(client=None)
        self.objects = {}
        self.fail = False

    def ensure_bucket(self, bucket):
        if self.fail:
            raise StorageError("object storage unavailable")
        self.objects.setdefault(bucket, {})

    def put_object(self, bucket, key, data, content_type):
        self.objects[bucket][key] = (data, content_type)

    def presigned_get_url(self, bucket, key, expires_in):
        return f"http://storage.local/{bucket}/{key}?X-Amz-Expires={expires_in}"


class FakeGoogleClient:
    """Stands in for the authlib Google client; tests set `userinfo` or `error`."""

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"

    def __init__(self):
        self.userinfo = None
        self.error = None

    async def authorize_redirect(self, request, redirect_uri):
        return RedirectResponse(f"{self.AUTHORIZE_URL}?redirect_uri={redirect_uri}", status_code=302)

    async def fetch_userinfo(self, request):
        if self.error is not None:
            raise self.error
        return dict(self.userinfo)


@pytest.fixture(autouse=True)
def database():
    """Fresh tables for every test."""
    metadata.drop_all(bind=engine)
    metadata.create_all(bind=engine)
    yield


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def session_collection():
    return mongomock.MongoClient().jobboard_sessions.sessions


@pytest.fixture
def google_client():
    return FakeGoogleClient()


@pytest.fixture
def services(storage, session_collection, google_client):
    return build_services(
        get_settings(),
        storage=storage,
        session_collection=session_collection,
        google_client=google_client,
    )


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def register_account(client):
    """POST /api/{kind}/register, returns the response."""

    def _register(kind="companies", name="Acme Corp", email="hr@acme.com",
                  password=DEFAULT_PASSWORD, confirm=None):
        return client.post(
            f"/api/{kind}/register",
            json={
                "officialName": name,
                "email": email,
                "password": password,
                "confirmPassword": password if confirm is None else confirm,
            },
        )

    return _register


@pytest.fixture
def approved_account(client, register_account):
    """Register and approve an account, returns {accountId, approvalId}."""

    def _approved(kind="companies", **kwargs):
        response = register_account(kind, **kwargs)
        assert response.status_code == 201, response.json()
        data = response.json()["data"]
        decision = client.post(
            f"/api/admin/{kind}/approval",
            json={"id": data["accountId"], "status": "APPROVED"},
            headers=ADMIN_HEADERS,
        )
        assert decision.status_code == 200, decision.json()
        return data

    return _approved


@pytest.fixture
def login(client):
    def _login(kind, username, password=DEFAULT_PASSWORD):
        return client.post(f"/api/{kind}/login", json={"username": username, "password": password})

    return _login


@pytest.fixture
def company_session(approved_account, login):
    """Logged-in company, returns its account id."""
    data = approved_account("companies", name="Acme Corp", email="hr@acme.com")
    assert login("companies", "Acme Corp").status_code == 200
    return data["accountId"]


@pytest.fixture
def employer_session(approved_account, login):
    """Logged-in employer, returns its account id."""
    data = approved_account("employers", name="Jane Hiring", email="jane@hiring.com")
    assert login("employers", "jane@hiring.com").status_code == 200
    return data["accountId"]
