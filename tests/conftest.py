import bcrypt
import pytest
from fastapi.testclient import TestClient

from genbooks.core.config import Settings
from genbooks.main import create_app
from genbooks.storage import SupabaseOrderStore
from tests.fakes import FakeSupabaseManager

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"

# low cost factor keeps the login tests quick
ADMIN_PASSWORD_HASH = bcrypt.hashpw(ADMIN_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture
def settings(data_file):
    return Settings(
        STORAGE_BACKEND="file",
        DATA_FILE=str(data_file),
        SESSION_SECRET="test-secret",
        ENVIRONMENT="test",
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=None,
        ADMIN_PASSWORD_HASH=ADMIN_PASSWORD_HASH,
        EMAIL_HOST="",
        EMAIL_USER="",
        EMAIL_PASS="",
        EMAIL_FROM="",
        WEBSITE_URL="https://genbooks.example",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def supabase_manager():
    return FakeSupabaseManager()


@pytest.fixture(params=["file", "supabase"])
def any_client(request, settings, supabase_manager):
    """A client for each storage backend, backed by the same API."""
    store = SupabaseOrderStore(db=supabase_manager) if request.param == "supabase" else None
    with TestClient(create_app(settings, store=store)) as c:
        c.backend = request.param
        yield c


def login(client, username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
    return client.post("/api/admin/login", json={"username": username, "password": password})
