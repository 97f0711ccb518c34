"""
Acceptance tests for the HTTP API.

Requests go through the full FastAPI stack (middleware, validation, routers)
with an httpx client bound to the ASGI app, against the test database.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from kompagnon.api import fast_api
from kompagnon.api.utils import encode_token
from kompagnon.database.config.config import settings
from kompagnon.database.daos.user_dao import UserDao
from tests.database_builder import build_user

pytestmark = pytest.mark.asyncio


def registration_body(**overrides):
    body = {
        "firstname": "John",
        "lastname": "Doe",
        "email": "john.doe@example.net",
        "password": "Str0ng!Password",
        "birthday": "01/01/2001",
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# GET /api/health
# ---------------------------------------------------------------------------


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.text == "api is ok!"


# ---------------------------------------------------------------------------
# POST /api/authentication/register
# ---------------------------------------------------------------------------


async def test_register_creates_inactive_user(client):
    response = await client.post("/api/authentication/register", json=registration_body())

    assert response.status_code == 201
    assert response.content == b""
    user = await UserDao().findByEmail("john.doe@example.net")
    assert user is not None
    assert user["is_active"] is False


async def test_register_with_invalid_body(client):
    response = await client.post("/api/authentication/register", json={"firstname": "toto"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request body"
    assert {detail["field"] for detail in body["details"]} >= {"body.lastname", "body.email", "body.password"}


async def test_register_with_invalid_email(client):
    response = await client.post("/api/authentication/register", json=registration_body(email="not-an-email"))

    assert response.status_code == 400


async def test_register_with_weak_password(client):
    response = await client.post("/api/authentication/register", json=registration_body(password="password"))

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Password does not meet security requirements"
    assert "Password must contain at least one uppercase letter" in body["details"]
    assert await UserDao().findByEmail("john.doe@example.net") is None


async def test_register_with_existing_email(client):
    await build_user(email="john.doe@example.net")

    response = await client.post("/api/authentication/register", json=registration_body())

    assert response.status_code == 409
    assert response.json() == {"message": "Email already exists"}


async def test_register_unexpected_error(client):
    with patch.object(fast_api, "register_user", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = await client.post("/api/authentication/register", json=registration_body())

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


# ---------------------------------------------------------------------------
# POST /api/authentication/authenticate
# ---------------------------------------------------------------------------


async def test_authenticate(client):
    user = await build_user(email="test@example.net", is_active=True)

    response = await client.post(
        "/api/authentication/authenticate", json={"email": "test@example.net", "password": user["password"]}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["userId"] == user["id"]
    assert data["token"]


async def test_authenticate_with_invalid_schema(client):
    response = await client.post("/api/authentication/authenticate", json={"email": "test", "password": "password"})

    assert response.status_code == 400


async def test_authenticate_with_wrong_password(client):
    await build_user(email="test@example.net")

    response = await client.post(
        "/api/authentication/authenticate", json={"email": "test@example.net", "password": "Wr0ng!Password"}
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


async def test_authenticate_unknown_user(client):
    response = await client.post(
        "/api/authentication/authenticate", json={"email": "nobody@example.net", "password": "Str0ng!Password"}
    )

    assert response.status_code == 401


async def test_authenticate_inactive_user(client):
    user = await build_user(email="test@example.net", is_active=False)

    response = await client.post(
        "/api/authentication/authenticate", json={"email": "test@example.net", "password": user["password"]}
    )

    assert response.status_code == 404


async def test_authenticate_locked_account(client):
    locked_until = datetime.now(timezone.utc) + timedelta(hours=1)
    user = await build_user(email="test@example.net", account_locked_until=locked_until)

    response = await client.post(
        "/api/authentication/authenticate", json={"email": "test@example.net", "password": user["password"]}
    )

    assert response.status_code == 423
    assert response.json() == {"message": "Account is temporarily locked due to too many failed login attempts"}


async def test_authenticate_locks_after_repeated_failures(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_LOGIN_ATTEMPTS", 2)
    user = await build_user(email="test@example.net")
    wrong = {"email": "test@example.net", "password": "Wr0ng!Password"}

    statuses = [(await client.post("/api/authentication/authenticate", json=wrong)).status_code for _ in range(2)]
    response = await client.post(
        "/api/authentication/authenticate", json={"email": "test@example.net", "password": user["password"]}
    )

    assert statuses == [401, 401]
    assert response.status_code == 423


async def test_authenticate_unexpected_error(client):
    with patch.object(fast_api, "authenticate_user", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = await client.post(
            "/api/authentication/authenticate", json={"email": "test@example.net", "password": "Str0ng!Password"}
        )

    assert response.status_code == 500


# ---------------------------------------------------------------------------
# GET /api/authentication/activate
# ---------------------------------------------------------------------------


async def test_activate_inactive_user(client):
    user = await build_user(email="activate-test-1@example.com", is_active=False)
    token = encode_token({"userId": user["id"]})

    response = await client.get("/api/authentication/activate", params={"token": token})

    assert response.status_code == 201
    assert response.json() == {"message": "User activated successfully"}
    assert (await UserDao().findById(user["id"]))["is_active"] is True


async def test_activate_without_token(client):
    response = await client.get("/api/authentication/activate")

    assert response.status_code == 400
    assert response.json() == {"error": "Token is required"}


async def test_activate_with_invalid_token(client):
    response = await client.get("/api/authentication/activate", params={"token": "invalid.token.here"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid or expired token"}


async def test_activate_with_expired_token(client):
    token = encode_token({"userId": 1}, expires_minutes=-1)

    response = await client.get("/api/authentication/activate", params={"token": token})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid or expired token"}


async def test_activate_unknown_user(client):
    token = encode_token({"userId": 999999})

    response = await client.get("/api/authentication/activate", params={"token": token})

    assert response.status_code == 401
    assert response.json() == {"error": "User not found or already active"}


async def test_activate_already_active_user(client):
    user = await build_user(email="activate-test-2@example.com", is_active=True)
    token = encode_token({"userId": user["id"]})

    response = await client.get("/api/authentication/activate", params={"token": token})

    assert response.status_code == 401
    assert response.json() == {"error": "User not found or already active"}


async def test_activate_unexpected_error(client):
    token = encode_token({"userId": 1})

    with patch.object(fast_api, "activate_user", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = await client.get("/api/authentication/activate", params={"token": token})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


# ---------------------------------------------------------------------------
# GET /api/authentication/me
# ---------------------------------------------------------------------------


async def test_me_with_authorisation_header(client):
    user = await build_user()
    token = encode_token({"userId": user["id"], "userType": "user"})

    response = await client.get("/api/authentication/me", headers={"Authorisation": token})

    assert response.status_code == 200
    assert response.json() == {"firstName": "John", "lastName": "Doe", "userId": user["id"]}


async def test_me_with_bearer_header(client):
    user = await build_user()
    token = encode_token({"userId": user["id"]})

    response = await client.get("/api/authentication/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["userId"] == user["id"]


async def test_me_without_token(client):
    response = await client.get("/api/authentication/me")

    assert response.status_code == 401
    assert response.json() == {"detail": "Token is required"}


async def test_me_with_invalid_token(client):
    response = await client.get("/api/authentication/me", headers={"Authorisation": "invalid.token.here"})

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid token"}


async def test_me_for_unknown_user(client):
    token = encode_token({"userId": 999999})

    response = await client.get("/api/authentication/me", headers={"Authorisation": token})

    assert response.status_code == 401


async def test_me_when_user_lookup_fails(client):
    token = encode_token({"userId": 1})

    with patch.object(UserDao, "findById", new=AsyncMock(side_effect=RuntimeError("db down"))):
        response = await client.get("/api/authentication/me", headers={"Authorisation": token})

    assert response.status_code == 401
    assert response.json() == {"detail": "Internal server error"}


async def test_me_when_secret_is_missing(client, monkeypatch):
    token = encode_token({"userId": 1})
    monkeypatch.setattr(settings, "SECRET_KEY", "")

    response = await client.get("/api/authentication/me", headers={"Authorisation": token})

    assert response.status_code == 401
    assert response.json() == {"detail": "JWT secret is not configured"}


# ---------------------------------------------------------------------------
# POST /api/authentication/password-reset/request and /password-reset
# ---------------------------------------------------------------------------


async def test_password_reset_request_for_known_email(client):
    await build_user(email="test@example.net")

    with patch("kompagnon.database.core.funcs.send_password_reset_mail", new=AsyncMock()) as send:
        response = await client.post("/api/authentication/password-reset/request", json={"email": "test@example.net"})

    assert response.status_code == 200
    assert response.json() == {"message": "If an account with this email exists, a password reset link has been sent"}
    send.assert_awaited_once()


async def test_password_reset_request_for_unknown_email(client):
    with patch("kompagnon.database.core.funcs.send_password_reset_mail", new=AsyncMock()) as send:
        response = await client.post("/api/authentication/password-reset/request", json={"email": "nobody@example.net"})

    assert response.status_code == 200
    assert response.json() == {"message": "If an account with this email exists, a password reset link has been sent"}
    send.assert_not_awaited()


async def test_password_reset_request_with_invalid_email(client):
    response = await client.post("/api/authentication/password-reset/request", json={"email": "not-an-email"})

    assert response.status_code == 400


async def test_password_reset_request_unexpected_error(client):
    with patch.object(fast_api, "request_password_reset", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = await client.post("/api/authentication/password-reset/request", json={"email": "a@example.net"})

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


async def test_password_reset_with_invalid_token(client):
    response = await client.post(
        "/api/authentication/password-reset", json={"token": "invalid.token.here", "newPassword": "N3w!Password"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "The reset token is invalid or has expired"}


async def test_password_reset_with_activation_token(client):
    user = await build_user()
    token = encode_token({"userId": user["id"]})

    response = await client.post(
        "/api/authentication/password-reset", json={"token": token, "newPassword": "N3w!Password"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "The reset token is invalid or has expired"}


async def test_password_reset_with_weak_password(client):
    user = await build_user()
    token = encode_token({"userId": user["id"], "type": "password_reset"})

    response = await client.post("/api/authentication/password-reset", json={"token": token, "newPassword": "weak"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Password does not meet security requirements"
    assert "Password must be at least 8 characters long" in body["details"]


async def test_password_reset_unexpected_error(client):
    with patch.object(fast_api, "reset_password", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = await client.post("/api/authentication/password-reset", json={"token": "t", "newPassword": "p"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


async def test_request_and_reset_password(client):
    user = await build_user(email="test@example.net")

    with patch("kompagnon.database.core.funcs.send_password_reset_mail", new=AsyncMock()) as send:
        await client.post("/api/authentication/password-reset/request", json={"email": "test@example.net"})
    token = send.await_args.kwargs["token"]

    response = await client.post(
        "/api/authentication/password-reset", json={"token": token, "newPassword": "N3w!Password"}
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Password reset successfully. You can now log in with your new password."}

    response = await client.post(
        "/api/authentication/password-reset", json={"token": token, "newPassword": "N3w!Password"}
    )
    assert response.status_code == 400

    old = {"email": "test@example.net", "password": user["password"]}
    new = {"email": "test@example.net", "password": "N3w!Password"}
    assert (await client.post("/api/authentication/authenticate", json=old)).status_code == 401
    assert (await client.post("/api/authentication/authenticate", json=new)).status_code == 200


# ---------------------------------------------------------------------------
# Full flow
# ---------------------------------------------------------------------------


async def test_register_activate_and_authenticate(client):
    sent = {}

    async def capture(**kwargs):
        sent.update(kwargs)

    with patch("kompagnon.database.core.funcs.send_activation_mail", new=capture):
        response = await client.post("/api/authentication/register", json=registration_body())
    assert response.status_code == 201

    credentials = {"email": "john.doe@example.net", "password": "Str0ng!Password"}
    response = await client.post("/api/authentication/authenticate", json=credentials)
    assert response.status_code == 404

    response = await client.get("/api/authentication/activate", params={"token": sent["token"]})
    assert response.status_code == 201

    response = await client.post("/api/authentication/authenticate", json=credentials)
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    response = await client.get("/api/authentication/me", headers={"Authorisation": token})
    assert response.json()["firstName"] == "John"
