import threading

import pytest

from app.errors import DuplicateSubdomain, UniquenessConflict
from app.features.auth.models.user_model import User
from app.features.auth.schemas.auth_schema import RegisterRequest

from conftest import ALICE


def test_register_returns_public_fields(client, store):
    resp = client.post("/api/auth/register", json=ALICE)
    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "alice"
    assert body["businessName"] == "Alice Shop"
    assert body["subdomain"] == "aliceshop"
    assert body["isVerified"] is False
    assert body["preferredLanguage"] == "th"
    assert "password" not in body
    assert "secret1" not in resp.text

    stored = store.get_user(body["id"])
    assert stored.password and stored.password != "secret1"


def test_end_to_end_register_and_login(client):
    first = client.post("/api/auth/register", json=ALICE)
    assert first.status_code == 201

    again = client.post("/api/auth/register", json={**ALICE, "email": "other@x.com", "subdomain": "othershop"})
    assert again.status_code == 400
    assert again.json()["detail"] == "Username already exists"

    bad = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid username or password"

    good = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert good.status_code == 200
    assert good.json()["success"] is True
    assert good.json()["data"]["tokenType"] == "bearer"

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == first.json()["id"]


@pytest.mark.parametrize(
    "changes, detail",
    [
        ({"username": "ALICE", "email": "b@x.com", "subdomain": "bobshop"}, "Username already exists"),
        ({"username": "bob", "email": "A@X.com", "subdomain": "bobshop"}, "Email already exists"),
        ({"username": "bob", "email": "b@x.com", "subdomain": " aliceshop "}, "Subdomain already exists"),
    ],
)
def test_duplicate_registration_is_rejected(client, registered, changes, detail):
    resp = client.post("/api/auth/register", json={**ALICE, **changes})
    assert resp.status_code == 400
    assert resp.json()["detail"] == detail


@pytest.mark.parametrize(
    "subdomain, detail",
    [
        ("ab", "Subdomain must be at least 3 characters long"),
        ("my-shop", "Subdomain can only contain lowercase letters, numbers, and Thai characters without spaces or special characters"),
        ("admin", "This subdomain is reserved and cannot be used"),
        ("MyShop", "Subdomain can only contain lowercase letters, numbers, and Thai characters without spaces or special characters"),
    ],
)
def test_invalid_subdomain_is_rejected(client, subdomain, detail):
    resp = client.post("/api/auth/register", json={**ALICE, "subdomain": subdomain})
    assert resp.status_code == 400
    assert resp.json()["detail"] == detail


def test_register_validates_payload(client):
    resp = client.post("/api/auth/register", json={**ALICE, "password": "123"})
    assert resp.status_code == 422
    resp = client.post("/api/auth/register", json={**ALICE, "email": "not-an-email"})
    assert resp.status_code == 422


def test_login_with_unknown_user_matches_wrong_password(client, registered):
    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "secret1"})
    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "secret2"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


def test_login_is_case_insensitive_on_username(client, registered):
    resp = client.post("/api/auth/login", json={"username": "Alice", "password": "secret1"})
    assert resp.status_code == 200


def test_me_requires_session(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authentication required"


def test_bearer_token_authenticates(app, registered):
    from fastapi.testclient import TestClient

    login = TestClient(app).post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    token = login.json()["data"]["accessToken"]

    fresh = TestClient(app)
    assert fresh.get("/api/auth/me").status_code == 401
    resp = fresh.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"


def test_logout_ends_session(client, app, logged_in):
    assert client.get("/api/auth/me").status_code == 200
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert client.get("/api/auth/me").status_code == 401
    assert app.state.sessions.count() == 0


def test_logout_without_session_still_succeeds(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["success"] is True


def test_logout_swallows_teardown_errors(auth_service, monkeypatch):
    def broken(token):
        raise RuntimeError("session backend down")

    monkeypatch.setattr(auth_service.sessions, "destroy", broken)
    auth_service.logout("whatever")


def test_stale_session_reports_user_not_found(client, app):
    token = app.state.sessions.issue(User(id=999, username="ghost"))
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found"


def test_oauth_only_account_cannot_password_login(client):
    resp = client.post(
        "/api/auth/oauth",
        json={"email": "g@x.com", "displayName": "Gina", "authProvider": "google", "providerId": "g-1"},
    )
    assert resp.status_code == 200
    client.cookies.clear()

    resp = client.post("/api/auth/login", json={"username": "gina", "password": "anything"})
    assert resp.status_code == 401


def test_concurrent_registrations_for_one_subdomain(auth_service, store):
    results = []

    def attempt(n):
        try:
            auth_service.register(RegisterRequest(
                username=f"user{n}",
                password="secret1",
                email=f"user{n}@x.com",
                business_name="Same Shop",
                subdomain="sameshop",
            ))
            results.append("ok")
        except (DuplicateSubdomain, UniquenessConflict) as exc:
            results.append(type(exc).__name__)

    threads = [threading.Thread(target=attempt, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert len(results) == 8
    assert len(store.get_all_users()) == 1
    assert store.get_user_by_subdomain("sameshop") is not None


def test_non_ascii_usernames_collide_across_case(client):
    first = client.post("/api/auth/register", json={**ALICE, "username": "Ünal"})
    assert first.status_code == 201

    second = client.post(
        "/api/auth/register",
        json={**ALICE, "username": "ünal", "email": "u@x.com", "subdomain": "unalshop"},
    )
    assert second.status_code == 400
    assert second.json()["detail"] == "Username already exists"


def test_storage_failure_is_reported_without_internals(app, monkeypatch):
    from fastapi.testclient import TestClient
    from sqlalchemy.exc import SQLAlchemyError

    def broken(username):
        raise SQLAlchemyError("disk I/O error on users_secret_table")

    monkeypatch.setattr(app.state.store, "get_user_by_username", broken)
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
    assert "users_secret_table" not in resp.text
    assert "disk I/O" not in resp.text
