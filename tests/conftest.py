import pytest
from fastapi.testclient import TestClient

from socketspeak.database.core import funcs, keys
from socketspeak.database.core.db import drop_db, init_db
from socketspeak.main import create_app


@pytest.fixture(autouse=True)
def fresh_db():
    """Every test starts from empty tables."""
    drop_db()
    init_db()
    yield


@pytest.fixture
def make_user():
    """Create a user directly in the store; `private_key` also marks it as set."""

    def _make(email: str, full_name: str = "Test User", password: str = "secret123", private_key: str | None = None):
        user = funcs.create_user(full_name=full_name, email=email, password=password)
        if private_key is not None:
            user = keys.set_private_key(user.id, private_key)
        return user

    return _make


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    # One client (one event loop) for HTTP and WebSocket traffic alike.
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    """Sign up through the API and return (profile json, auth headers)."""

    def _login(email: str, full_name: str = "Test User", password: str = "secret123"):
        resp = client.post("/api/auth/signup", json={"fullName": full_name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        token = resp.cookies["token"]
        # the cookie jar would otherwise win over the per-user bearer header
        client.cookies.clear()
        return resp.json(), {"Authorization": f"Bearer {token}"}

    return _login
