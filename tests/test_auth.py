"""
Tests for signup, login and session handling
"""
from datetime import timedelta

import pytest
from jose import jwt

from printhaus.core.config import settings
from printhaus.core.cookies import CSRF_HEADER, CSRF_TOKEN_COOKIE, SESSION_COOKIE
from printhaus.core.security import create_session_token, get_password_hash, read_session_token, verify_password
from tests.conftest import TEST_PASSWORD


def signup_payload(email="new@example.com", password="s3cret-password"):
    return {"email": email, "password": password, "first_name": "Ada", "last_name": "Lovelace"}


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_sets_session_cookies(self, client):
        resp = await client.post("/api/auth/signup", json=signup_payload())

        assert resp.status_code == 201
        body = resp.json()
        assert body["user"]["email"] == "new@example.com"
        assert body["access_token"]
        assert SESSION_COOKIE in resp.cookies
        assert resp.cookies[CSRF_TOKEN_COOKIE] == body["csrf_token"]
        assert "hashed_password" not in body["user"]

    @pytest.mark.asyncio
    async def test_first_user_becomes_admin(self, client):
        first = await client.post("/api/auth/signup", json=signup_payload("first@example.com"))
        second = await client.post("/api/auth/signup", json=signup_payload("second@example.com"))

        assert first.json()["user"]["user_type"] == "admin"
        assert second.json()["user"]["user_type"] == "customer"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflict(self, client, customer):
        resp = await client.post("/api/auth/signup", json=signup_payload("Customer@Example.com"))

        assert resp.status_code == 409
        assert resp.json()["error"] == "email_taken"

    @pytest.mark.asyncio
    async def test_invalid_payload_is_400_with_field_details(self, client):
        resp = await client.post("/api/auth/signup", json={"email": "not-an-email", "password": "x"})

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "validation_error"
        fields = {err["field"] for err in body["details"]["errors"]}
        assert {"email", "password"} <= fields


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client, customer):
        resp = await client.post(
            "/api/auth/login",
            json={"email": "customer@example.com", "password": TEST_PASSWORD},
        )

        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "customer@example.com"
        assert SESSION_COOKIE in resp.cookies

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, customer):
        resp = await client.post(
            "/api/auth/login",
            json={"email": "customer@example.com", "password": "wrong-password"},
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_blocked_user_cannot_login(self, client, customer, admin):
        user, _ = customer
        _, admin_headers = admin
        await client.put(f"/api/admin/users/{user.id}/block", json={"is_blocked": True}, headers=admin_headers)

        resp = await client.post(
            "/api/auth/login",
            json={"email": "customer@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 403
        assert resp.json()["error"] == "account_blocked"


class TestSession:
    @pytest.mark.asyncio
    async def test_current_user_with_bearer(self, client, customer):
        user, headers = customer
        resp = await client.get("/api/auth/user", headers=headers)

        assert resp.status_code == 200
        assert resp.json()["id"] == user.id

    @pytest.mark.asyncio
    async def test_current_user_requires_auth(self, client):
        resp = await client.get("/api/auth/user")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        resp = await client.get("/api/auth/user", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_cookie_session_and_csrf(self, client, catalog):
        signup = await client.post("/api/auth/signup", json=signup_payload())
        csrf = signup.json()["csrf_token"]
        product = catalog["Custom Keychain"]

        # Cookie auth works for reads
        me = await client.get("/api/auth/user")
        assert me.status_code == 200

        # Mutations without the CSRF header are refused
        refused = await client.post("/api/cart", json={"product_id": product.id})
        assert refused.status_code == 403
        assert refused.json()["error"] == "csrf_failed"

        accepted = await client.post(
            "/api/cart",
            json={"product_id": product.id},
            headers={CSRF_HEADER: csrf},
        )
        assert accepted.status_code == 200

    @pytest.mark.asyncio
    async def test_logout_clears_cookies(self, client):
        await client.post("/api/auth/signup", json=signup_payload())
        resp = await client.post("/api/auth/logout")

        assert resp.status_code == 200
        assert (await client.get("/api/auth/user")).status_code == 401


class TestSessionTokens:
    def test_round_trip(self):
        assert read_session_token(create_session_token(15)) == 15

    def test_expired_token_rejected(self):
        token = create_session_token(15, expires_delta=timedelta(seconds=-5))
        assert read_session_token(token) is None

    def test_other_token_type_rejected(self):
        token = jwt.encode({"sub": "15", "type": "refresh"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        assert read_session_token(token) is None

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"sub": "15", "type": "session"}, "someone-else", algorithm=settings.ALGORITHM)
        assert read_session_token(token) is None

    def test_password_hash(self):
        hashed = get_password_hash("s3cret-password")
        assert hashed != "s3cret-password"
        assert verify_password("s3cret-password", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("s3cret-password", "not-a-bcrypt-hash")
