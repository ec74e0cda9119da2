from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from datecourse.app import app

client = TestClient(app)


def _email() -> str:
    return f"user-{uuid.uuid4().hex[:8]}@example.com"


def _login_user(c):
    c.post("/auth/login", json={"email": "user@example.com", "password": "user123"})


# ── Register ─────────────────────────────────────────────────────────────


def test_register_creates_user():
    email = _email()
    resp = client.post("/auth/register", json={"email": email, "password": "pass1234"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == email
    assert body["role"] == "user"
    assert "password_hash" not in body


def test_register_duplicate_email_conflicts():
    email = _email()
    client.post("/auth/register", json={"email": email, "password": "pass1234"})
    resp = client.post("/auth/register", json={"email": email.upper(), "password": "other"})
    assert resp.status_code == 409


def test_register_rejects_bad_email():
    resp = client.post("/auth/register", json={"email": "not-an-email", "password": "pass1234"})
    assert resp.status_code == 422


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_after_register():
    email = _email()
    client.post("/auth/register", json={"email": email, "password": "pass1234", "nickname": "봄"})
    resp = client.post("/auth/login", json={"email": email, "password": "pass1234"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"]["nickname"] == "봄"


def test_login_seeded_admin():
    resp = client.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"email": "user@example.com", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert resp.status_code == 401


def test_auth_me_when_logged_in():
    _login_user(client)
    resp = client.get("/auth/me")
    assert resp.status_code == 200
    assert resp.json()["email"] == "user@example.com"


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    c = TestClient(app)
    _login_user(c)
    assert c.get("/auth/me").status_code == 200
    resp = c.post("/auth/logout")
    assert resp.json() == {"status": "logged_out"}
    assert c.get("/auth/me").status_code == 401


def test_admin_endpoint_forbidden_for_user():
    c = TestClient(app)
    _login_user(c)
    assert c.get("/admin/courses").status_code == 403


def test_admin_endpoint_requires_login():
    c = TestClient(app)
    assert c.get("/admin/courses").status_code == 401
