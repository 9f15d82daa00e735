"""Admin accounts: signup gate, login and current-admin lookup."""

from app.config import settings


def _signup(client, email="new-admin@example.com", admin_key=None, headers=None):
    payload = {"name": "New Admin", "email": email, "password": "secret123"}
    if admin_key is not None:
        payload["admin_key"] = admin_key
    return client.post("/api/admin/signup", json=payload, headers=headers or {})


def test_signup_with_secret_key(client, fake_db):
    res = _signup(client, admin_key=settings.admin_secret_key)
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "admin"
    assert data["user"]["name"] == "New Admin"

    me = client.get("/api/admin/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "new-admin@example.com"


def test_signup_with_admin_token(client, admin_headers):
    res = _signup(client, headers=admin_headers)
    assert res.status_code == 201


def test_signup_without_key_or_token_is_forbidden(client, fake_db):
    res = _signup(client)
    assert res.status_code == 403
    assert fake_db.auth.users == {}


def test_signup_with_wrong_key_is_forbidden(client):
    res = _signup(client, admin_key="nope")
    assert res.status_code == 403
    assert res.json()["message"] == "Invalid admin secret key"


def test_signup_as_non_admin_still_needs_key(client, viewer_headers):
    assert _signup(client, headers=viewer_headers).status_code == 403


def test_signup_duplicate_email_is_conflict(client, admin_headers):
    res = _signup(client, email="admin@example.com", admin_key=settings.admin_secret_key)
    assert res.status_code == 409


def test_signup_rejects_short_password(client):
    res = client.post(
        "/api/admin/signup",
        json={"name": "A", "email": "a@example.com", "password": "123", "admin_key": settings.admin_secret_key},
    )
    assert res.status_code == 400


def test_login(client, admin_headers):
    res = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "secret123"})
    assert res.status_code == 200
    assert res.json()["data"]["user"]["email"] == "admin@example.com"
    assert res.json()["message"] == "Admin login successful"


def test_login_non_admin_is_forbidden(client, viewer_headers):
    res = client.post("/api/admin/login", json={"email": "viewer@example.com", "password": "secret123"})
    assert res.status_code == 403
    assert res.json()["message"] == "Access denied. Admin role required."


def test_login_bad_password(client, admin_headers):
    res = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "wrong"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"


def test_me_requires_token(client):
    res = client.get("/api/admin/me")
    assert res.status_code == 401
    assert res.json()["message"] == "Not authorized, no token"


def test_me_rejects_unknown_token(client):
    res = client.get("/api/admin/me", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_me_rejects_non_admin(client, viewer_headers):
    assert client.get("/api/admin/me", headers=viewer_headers).status_code == 403


def test_signup_with_non_ascii_wrong_key_is_forbidden(client, fake_db):
    res = _signup(client, admin_key="clé")
    assert res.status_code == 403
    assert fake_db.auth.users == {}
