from __future__ import annotations

from fastapi.testclient import TestClient

from dating.app import app
from dating.store.backends import reset_stores


def _signup(c, email="alex@example.com", password="secret123"):
    return c.post("/auth/signup", json={"email": email, "password": password})


def setup_function():
    reset_stores()


# ── Signup / Login / Logout ──────────────────────────────────────────────


def test_signup_logs_user_in():
    c = TestClient(app)
    resp = _signup(c)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["email"] == "alex@example.com"
    assert user["id"]
    assert c.get("/auth/me").json() == user


def test_signup_duplicate_email():
    _signup(TestClient(app))
    resp = _signup(TestClient(app), email="ALEX@example.com")
    assert resp.status_code == 409


def test_signup_validation():
    c = TestClient(app)
    assert _signup(c, email="not-an-email").status_code == 422
    assert _signup(c, password="123").status_code == 422


def test_login_success():
    user_id = _signup(TestClient(app)).json()["user"]["id"]
    c = TestClient(app)
    resp = c.post("/auth/login", json={"email": "alex@example.com", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user_id


def test_login_wrong_password():
    _signup(TestClient(app))
    resp = TestClient(app).post(
        "/auth/login", json={"email": "alex@example.com", "password": "wrong"},
    )
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = TestClient(app).post("/auth/login", json={"email": "nobody@x.io", "password": "x"})
    assert resp.status_code == 401


def test_auth_me_not_logged_in():
    assert TestClient(app).get("/auth/me").status_code == 401


def test_logout():
    c = TestClient(app)
    _signup(c)
    resp = c.post("/auth/logout")
    assert resp.json()["status"] == "logged_out"
    assert c.get("/auth/me").status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_protected_routes_require_login():
    c = TestClient(app)
    assert c.get("/discover").status_code == 401
    assert c.get("/matches").status_code == 401
    assert c.get("/profile").status_code == 401
    assert c.post("/swipe", json={"swipedId": "x", "liked": True}).status_code == 401


def test_public_endpoints():
    c = TestClient(app)
    assert c.get("/health").json() == {"status": "ok"}
    body = c.get("/metadata").json()
    assert "creative" in body["traits"]
    assert body["looking_for"] == ["male", "female", "everyone"]
