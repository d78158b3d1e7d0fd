from __future__ import annotations

import pytest

from conftest import PASSWORD

pytestmark = pytest.mark.integration


def _signup(client, email="newcomer@archivist.dev", password="journal2026"):
    return client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": password, "name": "Newcomer"},
    )


class TestSignupAndSignin:
    def test_signup_returns_user_and_tokens(self, client):
        resp = _signup(client, email="NewComer@Archivist.dev")
        body = resp.json()

        assert resp.status_code == 201
        assert body["ok"] is True
        assert body["result"]["user"]["email"] == "newcomer@archivist.dev"
        assert body["result"]["tokens"]["token_type"] == "bearer"

        token = body["result"]["tokens"]["access_token"]
        me = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["result"]["user"]["name"] == "Newcomer"

    def test_duplicate_email_conflicts(self, client):
        _signup(client)
        resp = _signup(client)
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "AUTH_EMAIL_ALREADY_EXISTS"

    def test_weak_password_rejected(self, client):
        resp = _signup(client, password="lettersonly")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "AUTH_PASSWORD_TOO_WEAK"

    def test_signin(self, client, alice):
        resp = client.post(
            "/api/v1/auth/signin",
            json={"email": "alice@archivist.dev", "password": PASSWORD},
        )
        assert resp.status_code == 200
        assert resp.json()["result"]["user"]["id"] == str(alice.id)

    def test_signin_wrong_password(self, client, alice):
        resp = client.post(
            "/api/v1/auth/signin",
            json={"email": "alice@archivist.dev", "password": "wrong-one-1"},
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTH_INVALID_CREDENTIALS"


class TestTokens:
    def test_missing_header_is_unauthenticated(self, client):
        resp = client.get("/api/v1/me")
        body = resp.json()
        assert resp.status_code == 401
        assert body["ok"] is False
        assert body["error"]["code"] == "AUTH_NOT_AUTHENTICATED"

    def test_garbage_token(self, client):
        resp = client.get("/api/v1/me", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_refresh_rotates_and_old_token_dies(self, client):
        tokens = _signup(client).json()["result"]["tokens"]

        resp = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": tokens["refresh_token"]},
        )
        assert resp.status_code == 200
        assert resp.json()["result"]["refresh_token"] != tokens["refresh_token"]

        replay = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": tokens["refresh_token"]},
        )
        assert replay.status_code == 401
        assert replay.json()["error"]["code"] == "AUTH_REFRESH_JTI_MISMATCH"

    def test_access_token_cannot_refresh(self, client):
        tokens = _signup(client).json()["result"]["tokens"]
        resp = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": tokens["access_token"]},
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTH_INVALID_TOKEN_TYPE"

    def test_logout_revokes_session(self, client, alice_headers):
        assert client.post("/api/v1/auth/logout", headers=alice_headers).status_code == 200

        resp = client.get("/api/v1/me", headers=alice_headers)
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTH_SESSION_REVOKED"


class TestMe:
    def test_update_name_and_image(self, client, alice_headers):
        resp = client.put(
            "/api/v1/me",
            json={"name": "Alice L.", "image": "https://img.archivist.dev/a.png"},
            headers=alice_headers,
        )
        user = resp.json()["result"]["user"]
        assert resp.status_code == 200
        assert user["name"] == "Alice L."
        assert user["image"] == "https://img.archivist.dev/a.png"
