import pytest
from fastapi.testclient import TestClient

from crm.core.config import Settings
from crm.main import create_app

DEFAULT_PASSWORD = "password123"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path/'test.db'}",
        jwt_secret="test-secret-key-with-at-least-32-bytes",
        bcrypt_rounds=4,
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def login_as(client):
    """Register (if needed) and log in; returns auth headers for the user."""

    def _login(username: str, password: str = DEFAULT_PASSWORD, role: str = "user") -> dict:
        client.post("/register", json={"username": username, "password": password, "role": role})
        r = client.post("/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login
