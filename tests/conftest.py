import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from main import create_app

ALICE = {
    "username": "alice",
    "password": "secret1",
    "email": "a@x.com",
    "businessName": "Alice Shop",
    "subdomain": "aliceshop",
}


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SESSION_SECRET_KEY="test-secret",
        ARGON2_ROUNDS=1,
        ARGON2_MEMORY_COST=1024,
        ARGON2_PARALLELISM=1,
        OPENAI_API_KEY="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def store(app):
    return app.state.store


@pytest.fixture
def auth_service(app):
    return app.state.auth_service


@pytest.fixture
def oauth_service(app):
    return app.state.oauth_service


@pytest.fixture
def registered(client):
    resp = client.post("/api/auth/register", json=ALICE)
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def logged_in(client, registered):
    resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert resp.status_code == 200
    return registered
