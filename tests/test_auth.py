from unittest.mock import patch

from app.core.security import REFRESH, create_reset_token, decode_token
from app.models.user import User
from tests.shop_data import CUSTOMER_ID, auth_header


def _login(client, email, password, path="/api/auth/login"):
    return client.post(path, json={"email": email, "password": password})


def test_register_returns_user_and_tokens(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "New Parent", "email": "New@Example.com", "password": "secret1"},
    )
    assert res.status_code == 201

    body = res.json()
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "customer"
    assert "password" not in body["user"]
    assert body["token"]
    assert decode_token(body["refreshToken"], REFRESH)["sub"] == str(body["user"]["id"])

    me = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["name"] == "New Parent"


def test_register_duplicate_email(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "Dup", "email": "test@example.com", "password": "secret1"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "User already exists"


def test_register_short_password(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "Short", "email": "short@example.com", "password": "123"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Validation error"


def test_login(client, password):
    res = _login(client, "test@example.com", password)
    assert res.status_code == 200
    assert res.json()["user"]["id"] == CUSTOMER_ID

    bad = _login(client, "test@example.com", "wrong-password")
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid email or password"

    assert _login(client, "nobody@example.com", password).status_code == 401


def test_admin_login(client, password):
    res = _login(client, "admin@example.com", password, "/api/auth/admin/login")
    assert res.status_code == 200
    assert res.json()["user"]["role"] == "admin"

    res = _login(client, "test@example.com", password, "/api/auth/admin/login")
    assert res.status_code == 403


def test_refresh_token(client, password):
    tokens = _login(client, "test@example.com", password).json()

    res = client.post("/api/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert res.status_code == 200
    assert res.json()["token"]
    assert res.json()["refreshToken"]

    # an access token is not a refresh token
    res = client.post("/api/auth/refresh-token", json={"refreshToken": tokens["token"]})
    assert res.status_code == 401


def test_refresh_token_cannot_be_used_as_access_token(client, password):
    tokens = _login(client, "test@example.com", password).json()
    res = client.get(
        "/api/auth/profile", headers={"Authorization": f"Bearer {tokens['refreshToken']}"}
    )
    assert res.status_code == 401


def test_update_profile(client, customer_headers):
    res = client.put(
        "/api/auth/profile",
        json={"name": "Test Parent", "phone": "0700000000"},
        headers=customer_headers,
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Test Parent"
    assert res.json()["phone"] == "0700000000"


def test_profile_email_must_be_unique(client, customer_headers):
    res = client.put(
        "/api/auth/profile", json={"email": "admin@example.com"}, headers=customer_headers
    )
    assert res.status_code == 400


def test_password_change_requires_current_password(client, customer_headers, password):
    res = client.put(
        "/api/auth/profile", json={"newPassword": "brand-new"}, headers=customer_headers
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Current password is required"

    res = client.put(
        "/api/auth/profile",
        json={"currentPassword": "wrong", "newPassword": "brand-new"},
        headers=customer_headers,
    )
    assert res.status_code == 400

    res = client.put(
        "/api/auth/profile",
        json={"currentPassword": password, "newPassword": "brand-new"},
        headers=customer_headers,
    )
    assert res.status_code == 200
    assert _login(client, "test@example.com", "brand-new").status_code == 200


def test_profile_for_deleted_user_is_401(client):
    res = client.get("/api/auth/profile", headers=auth_header(999))
    assert res.status_code == 401


def test_forgot_password_sends_reset_link(client):
    with patch("app.services.auth_service.send_password_reset_email") as send:
        res = client.post("/api/auth/forgot-password", json={"email": "test@example.com"})

    assert res.status_code == 200
    send.assert_called_once()
    to_email, name, reset_url = send.call_args.args
    assert to_email == "test@example.com"
    assert name == "Test User"
    assert "/reset-password?token=" in reset_url


def test_forgot_password_unknown_email_looks_the_same(client):
    with patch("app.services.auth_service.send_password_reset_email") as send:
        res = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

    assert res.status_code == 200
    send.assert_not_called()


def test_forgot_password_survives_mail_failure(client):
    with patch(
        "app.services.auth_service.send_password_reset_email",
        side_effect=RuntimeError("SMTP is not configured"),
    ):
        res = client.post("/api/auth/forgot-password", json={"email": "test@example.com"})
    assert res.status_code == 200


def test_reset_password(client, session):
    user = session.get(User, CUSTOMER_ID)
    token = create_reset_token(user.id, user.password)

    res = client.post(
        "/api/auth/reset-password", json={"token": token, "newPassword": "fresh-pass"}
    )
    assert res.status_code == 200
    assert _login(client, "test@example.com", "fresh-pass").status_code == 200

    # single use
    res = client.post(
        "/api/auth/reset-password", json={"token": token, "newPassword": "again-pass"}
    )
    assert res.status_code == 400


def test_reset_password_with_garbage_token(client):
    res = client.post(
        "/api/auth/reset-password", json={"token": "garbage", "newPassword": "fresh-pass"}
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid or expired reset token"
