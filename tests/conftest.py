"""
Test fixtures and configuration for pytest.

The environment is fixed before the app or models are imported: storage
binds to an in-memory SQLite database and the testing config reads the
JWT secret and Polka key from here.
"""

import os

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

TEST_JWT_SECRET = "test-secret-0123456789abcdef0123456789abcdef"
TEST_POLKA_KEY = "f271c81ff7084ee5b99a5091b42d486e"

os.environ["APP_ENV"] = "testing"
os.environ["DB_URL"] = "sqlite://"
os.environ["PLATFORM"] = "dev"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["POLKA_KEY"] = TEST_POLKA_KEY
os.environ["FILESERVER_ROOT"] = os.path.join(ROOT, "public")

import pytest

from api import create_app
from models import storage
from utils.security import configure_hasher


@pytest.fixture(scope="session", autouse=True)
def fast_hasher():
    """Cheap argon2 parameters for unit tests that never build the app."""
    configure_hasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture(autouse=True)
def clean_db():
    yield
    storage.delete_all_users()
    storage.close()


@pytest.fixture()
def app():
    return create_app("testing")


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def register(client):
    def _register(email="walt@breakingbad.com", password="secret1"):
        r = client.post("/api/users", json={"email": email, "password": password})
        assert r.status_code == 201, r.get_json()
        return r.get_json()

    return _register


@pytest.fixture()
def login(client):
    def _login(email="walt@breakingbad.com", password="secret1", **extra):
        r = client.post("/api/login", json={"email": email, "password": password, **extra})
        assert r.status_code == 200, r.get_json()
        return r.get_json()

    return _login


@pytest.fixture()
def user_session(register, login):
    """A registered user and the body of their login response."""
    def _session(email="walt@breakingbad.com", password="secret1"):
        register(email, password)
        return login(email, password)

    return _session
