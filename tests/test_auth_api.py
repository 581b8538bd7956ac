"""Test authentication API endpoints.

Covers:
- POST /api/login
- GET /api/logout
- Bearer token checks on a protected endpoint

Status codes tested:
- 200 OK
- 400 Bad Request
- 401 Unauthorized
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from clientdesk.domain.auth_service import create_access_token, decode_access_token
from clientdesk.models.user import User


@pytest.mark.integration
class TestLogin:
    """Test login endpoint."""

    async def test_login_200_returns_token_and_user(self, client: AsyncClient, user_a: User):
        response = await client.post(
            "/api/login",
            json={"email": "user_a@example.com", "password": "password123"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Login successful"

        data = body["data"]
        assert data["user"] == {
            "id": user_a.id,
            "email": "user_a@example.com",
            "username": "user_a",
            "roles": ["ROLE_USER"],
        }
        assert "password" not in str(data["user"])

        payload = decode_access_token(data["token"])
        assert payload.sub == str(user_a.id)
        assert payload.username == "user_a"
        assert payload.roles == ["ROLE_USER"]

    async def test_login_401_wrong_password(self, client: AsyncClient, user_a: User):
        response = await client.post(
            "/api/login",
            json={"email": "user_a@example.com", "password": "wrong-password"}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
        assert response.json()["message"] == "Invalid credentials"

    async def test_login_401_unknown_email_same_message(self, client: AsyncClient, user_a: User):
        """Unknown email and wrong password must be indistinguishable."""
        wrong_password = await client.post(
            "/api/login",
            json={"email": "user_a@example.com", "password": "nope"}
        )
        unknown_email = await client.post(
            "/api/login",
            json={"email": "nobody@example.com", "password": "password123"}
        )
        assert unknown_email.status_code == 401
        assert unknown_email.json() == wrong_password.json()

    async def test_login_400_missing_password(self, client: AsyncClient):
        response = await client.post("/api/login", json={"email": "user_a@example.com"})
        assert response.status_code == 400
        assert response.json()["error"] == "MissingFields"
        assert response.json()["data"]["fields"] == ["password"]

    async def test_login_assigns_default_role_when_empty(
        self, client: AsyncClient, create_user, test_db
    ):
        user = await create_user("noroles@example.com", "noroles", roles=[])

        response = await client.post(
            "/api/login",
            json={"email": "noroles@example.com", "password": "password123"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["user"]["roles"] == ["ROLE_USER"]

        async with test_db() as s:
            stored = (await s.execute(select(User).where(User.id == user.id))).scalar_one()
        assert stored.roles == ["ROLE_USER"]


@pytest.mark.integration
class TestLogout:

    async def test_logout_200(self, client: AsyncClient):
        response = await client.get("/api/logout")
        assert response.status_code == 200
        assert response.json()["success"] is True


@pytest.mark.integration
class TestBearerToken:
    """Test bearer-token checks using POST /api/createclient."""

    async def test_401_missing_header(self, client: AsyncClient):
        response = await client.post("/api/createclient", json={"name": "Acme", "cif": "B1"})
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    async def test_401_not_bearer(self, client: AsyncClient, user_a_jwt: str):
        response = await client.post(
            "/api/createclient",
            json={"name": "Acme", "cif": "B1"},
            headers={"Authorization": f"Token {user_a_jwt}"},
        )
        assert response.status_code == 401

    async def test_401_garbage_token(self, client: AsyncClient):
        response = await client.post(
            "/api/createclient",
            json={"name": "Acme", "cif": "B1"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    async def test_401_expired_token(self, client: AsyncClient, user_a: User):
        token = create_access_token(
            user_a.id, user_a.email, user_a.username, user_a.roles,
            expires_delta=timedelta(minutes=-5),
        )
        response = await client.post(
            "/api/createclient",
            json={"name": "Acme", "cif": "B1"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    async def test_401_deleted_user(self, client: AsyncClient, user_a: User, auth_headers):
        response = await client.delete(f"/api/deleteusers/{user_a.id}")
        assert response.status_code == 200

        response = await client.post(
            "/api/createclient", json={"name": "Acme", "cif": "B1"}, headers=auth_headers
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"
