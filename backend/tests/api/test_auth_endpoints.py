"""HTTP tests for the /api/v1/auth blueprint."""

from __future__ import annotations

import pytest
from freezegun import freeze_time

from authsession.core.extensions import TOKEN_SERVICE_KEY
from authsession.services._shared.errors import UnauthorizedError
from tests.factories.user import UserFactory
from tests.helpers.tokens import bearer, tamper_signature

BASE = "/api/v1/auth"


def _signup(client, email="new@example.com", password="longenough", **extra):
    return client.post(f"{BASE}/signup", json={"email": email, "password": password, **extra})


def _problem(resp):
    assert resp.mimetype == "application/problem+json"
    return resp.get_json()


# --------------------------------- signup ---------------------------------- #
def test_signup_returns_201_with_pair(client):
    resp = _signup(client, name="Neo")

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert set(data) == {"access_token", "refresh_token", "expires_in", "user_id", "token_type"}
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == 1800
    assert data["user_id"].isdigit()
    assert resp.headers.get("X-Request-ID")


def test_signup_duplicate_email(client):
    UserFactory(email="dup@example.com")
    resp = _signup(client, email="DUP@example.com")

    assert resp.status_code == 400
    assert _problem(resp)["code"] == "EMAIL_EXISTS"


@pytest.mark.parametrize(
    "body",
    [
        {"email": "not-an-email", "password": "longenough"},
        {"email": "a@example.com", "password": "short"},
        {"email": "a@example.com"},
        {},
    ],
)
def test_signup_invalid_data(client, body):
    resp = client.post(f"{BASE}/signup", json=body)

    assert resp.status_code == 400
    problem = _problem(resp)
    assert problem["code"] == "INVALID_DATA"
    assert problem["details"]["errors"]


# --------------------------------- signin ---------------------------------- #
def test_signin_ok(client):
    user = UserFactory(email="a@example.com", password="s3cret-pass")
    resp = client.post(f"{BASE}/signin", json={"email": "A@example.com", "password": "s3cret-pass"})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["user_id"] == str(user.id)


def test_signin_unknown_email(client):
    resp = client.post(f"{BASE}/signin", json={"email": "x@example.com", "password": "whatever1"})
    assert resp.status_code == 400
    assert _problem(resp)["code"] == "EMAIL_NOT_FOUND"


def test_signin_wrong_password(client):
    UserFactory(email="a@example.com", password="s3cret-pass")
    resp = client.post(f"{BASE}/signin", json={"email": "a@example.com", "password": "nope-nope"})
    assert resp.status_code == 400
    assert _problem(resp)["code"] == "INVALID_PASSWORD"


def test_signin_missing_password(client):
    resp = client.post(f"{BASE}/signin", json={"email": "a@example.com"})
    assert resp.status_code == 400
    assert _problem(resp)["code"] == "INVALID_DATA"


# ------------------------------ token refresh ------------------------------ #
def test_token_rotation_flow(client):
    first = _signup(client).get_json()["data"]

    resp = client.post(f"{BASE}/token", json={"refresh_token": first["refresh_token"]})
    assert resp.status_code == 200
    second = resp.get_json()["data"]
    assert second["user_id"] == first["user_id"]
    assert second["refresh_token"] != first["refresh_token"]

    replay = client.post(f"{BASE}/token", json={"refresh_token": first["refresh_token"]})
    assert replay.status_code == 401
    assert _problem(replay)["code"] == "unauthorized"
    assert _problem(replay)["detail"] == "Unauthorized"

    again = client.post(f"{BASE}/token", json={"refresh_token": second["refresh_token"]})
    assert again.status_code == 200


@pytest.mark.parametrize("token", ["not-a-real-token", "a.b.c", "a.b.\ud800"])
def test_token_garbage_is_401(client, token):
    resp = client.post(f"{BASE}/token", json={"refresh_token": token})
    assert resp.status_code == 401
    assert _problem(resp)["code"] == "unauthorized"


def test_token_tampered_is_401(client):
    pair = _signup(client).get_json()["data"]
    resp = client.post(f"{BASE}/token", json={"refresh_token": tamper_signature(pair["refresh_token"])})
    assert resp.status_code == 401


def test_token_expired_is_401(client):
    with freeze_time("2026-01-01 00:00:00"):
        pair = _signup(client).get_json()["data"]
    with freeze_time("2026-02-15 00:00:00"):
        resp = client.post(f"{BASE}/token", json={"refresh_token": pair["refresh_token"]})
    assert resp.status_code == 401


def test_token_missing_body_is_invalid_data(client):
    resp = client.post(f"{BASE}/token", json={})
    assert resp.status_code == 400
    assert _problem(resp)["code"] == "INVALID_DATA"


# --------------------------- whoami / logout -------------------------------- #
def test_whoami_with_issued_access_token(client):
    pair = _signup(client, email="me@example.com", name="Me").get_json()["data"]

    resp = client.get(f"{BASE}/whoami", headers=bearer(pair["access_token"]))

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"id": int(pair["user_id"]), "email": "me@example.com", "name": "Me"}


def test_whoami_requires_token(client):
    resp = client.get(f"{BASE}/whoami")
    assert resp.status_code == 401
    assert _problem(resp)["code"] == "unauthorized"


def test_whoami_rejects_refresh_token(client):
    pair = _signup(client).get_json()["data"]
    resp = client.get(f"{BASE}/whoami", headers=bearer(pair["refresh_token"]))
    assert resp.status_code == 401


def test_route_guard_and_token_service_agree_on_access_tokens(app, client):
    tokens = app.extensions[TOKEN_SERVICE_KEY]
    pair = _signup(client).get_json()["data"]

    assert tokens.verify_access(pair["access_token"]) == str(pair["user_id"])
    assert client.get(f"{BASE}/whoami", headers=bearer(pair["access_token"])).status_code == 200

    for rejected in (pair["refresh_token"], tamper_signature(pair["access_token"])):
        with pytest.raises(UnauthorizedError):
            tokens.verify_access(rejected)
        assert client.get(f"{BASE}/whoami", headers=bearer(rejected)).status_code == 401


def test_logout_revokes_refresh(client):
    pair = _signup(client).get_json()["data"]

    resp = client.post(f"{BASE}/logout", headers=bearer(pair["access_token"]))
    assert resp.status_code == 204

    rotate = client.post(f"{BASE}/token", json={"refresh_token": pair["refresh_token"]})
    assert rotate.status_code == 401


# --------------------------------- health ---------------------------------- #
def test_health(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["refresh_store"] == "ok"
    assert body["backend"] == "memory"
