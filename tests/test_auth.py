from datetime import timedelta

from fastapi.testclient import TestClient

from conftest import bearer, register_user


def test_register_returns_token_user_and_athlete(client: TestClient):
    body = register_user(client, email="Fighter@Combat.IO", name="  Alex  ")
    assert body["token"]
    assert body["user"]["email"] == "fighter@combat.io"
    assert body["athlete"]["name"] == "Alex"
    assert isinstance(body["athlete"]["id"], int)
    assert "createdAt" in body["athlete"]


def test_register_duplicate_email_is_case_insensitive(client: TestClient):
    register_user(client, email="fighter@combat.io")
    r = client.post(
        "/api/auth/register",
        json={"email": "FIGHTER@combat.io", "password": "another1", "name": "Other"},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Email is already registered"


def test_register_duplicate_email_caught_by_unique_index(client: TestClient, monkeypatch):
    from combat_analyzer.services.auth_service import AuthService

    register_user(client, email="fighter@combat.io")
    monkeypatch.setattr(AuthService, "_email_taken", lambda self, email: False)

    r = client.post(
        "/api/auth/register",
        json={"email": "fighter@combat.io", "password": "another1", "name": "Other"},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Email is already registered"
    assert client.get("/api/athletes", params={"name": "Other"}).json() == []


def test_register_rejects_short_password(client: TestClient):
    r = client.post("/api/auth/register", json={"email": "a@combat.io", "password": "12345", "name": "A"})
    assert r.status_code == 422
    assert "at least 6" in r.json()["detail"]


def test_register_requires_all_fields(client: TestClient):
    r = client.post("/api/auth/register", json={"email": "a@combat.io", "password": "secret123"})
    assert r.status_code == 422


def test_login_roundtrip(client: TestClient):
    register_user(client, email="fighter@combat.io", password="secret123")

    r = client.post("/api/auth/login", json={"email": "Fighter@Combat.io", "password": "secret123"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["user"]["email"] == "fighter@combat.io"
    assert body["athlete"]["name"] == "Alex Fighter"

    me = client.get("/api/me", headers=bearer(body["token"]))
    assert me.status_code == 200
    assert me.json()["user"]["id"] == body["user"]["id"]
    assert me.json()["athlete"]["id"] == body["athlete"]["id"]


def test_login_wrong_password(client: TestClient):
    register_user(client, email="fighter@combat.io", password="secret123")
    r = client.post("/api/auth/login", json={"email": "fighter@combat.io", "password": "nope-nope"})
    assert r.status_code == 401
    r = client.post("/api/auth/login", json={"email": "ghost@combat.io", "password": "secret123"})
    assert r.status_code == 401


def test_me_requires_bearer_token(client: TestClient):
    r = client.get("/api/me")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"

    r = client.get("/api/me", headers={"Authorization": "Token abc"})
    assert r.status_code == 401

    r = client.get("/api/me", headers=bearer("not-a-jwt"))
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid or expired token"


def test_expired_token_is_rejected(client: TestClient, registered: dict):
    from combat_analyzer.security import create_access_token

    token = create_access_token(registered["user"]["id"], expires_delta=timedelta(seconds=-1))
    r = client.get("/api/me", headers=bearer(token))
    assert r.status_code == 401


def test_user_without_athlete_profile(client: TestClient, db):
    from combat_analyzer.models import User
    from combat_analyzer.security import create_access_token, get_password_hash

    user = User(email="coach@combat.io", password_hash=get_password_hash("secret123"))
    db.add(user)
    db.commit()

    headers = bearer(create_access_token(user.id))
    me = client.get("/api/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["athlete"] is None

    r = client.get("/api/my/dashboard", headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Athlete profile not found for this user"
