"""Test service endpoints and the translation of request errors.

Covers:
- 200 OK on / and /health
- 400 Bad Request for absent or null required fields
- 404 Not Found envelope
- 422 Unprocessable Entity for other malformed input
"""
import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestServiceEndpoints:

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


@pytest.mark.integration
class TestRequestErrors:

    async def test_null_field_counts_as_missing(self, client: AsyncClient):
        response = await client.post("/api/login", json={"email": None, "password": "x"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "MissingFields"
        assert body["data"]["fields"] == ["email"]
        assert "email" in body["message"]

    async def test_empty_body_lists_every_missing_field(self, client: AsyncClient):
        response = await client.post("/api/newusers", json={})
        assert response.status_code == 400
        assert set(response.json()["data"]["fields"]) == {"email", "username", "password"}

    async def test_wrong_type_is_422(self, client: AsyncClient):
        response = await client.get("/api/users", params={"page": "abc"})
        assert response.status_code == 422
        assert response.json()["error"] == "Validation"

    async def test_not_found_envelope(self, client: AsyncClient):
        response = await client.get("/api/users/12345")
        assert response.status_code == 404
        body = response.json()
        assert body == {"success": False, "error": "NotFound", "message": "User not found"}
