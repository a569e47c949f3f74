"""
Authentication endpoint tests.

Tests for:
- Registration endpoint
- Login endpoint
- Verify endpoint
- Get current user endpoint

References:
-----------
- FastAPI Testing: https://fastapi.tiangolo.com/tutorial/testing/
- Pytest Async: https://pytest-asyncio.readthedocs.io/
"""

import pytest
from httpx import AsyncClient

from app.core.identifiers import looks_like_user_id
from app.core.security import create_access_token, decode_access_token


# ================================
# Registration Endpoint Tests
# ================================

@pytest.mark.asyncio
class TestRegistration:
    """Test registration endpoint."""

    async def test_register_success(self, client: AsyncClient, sample_user_data: dict):
        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 201
        data = response.json()
        user = data["user"]
        assert looks_like_user_id(user["id"])
        assert user["displayName"] == "Jane Doe"
        assert user["email"] == "jane@example.com"
        assert user["slug"] == "jane-doe"
        assert "createdAt" in user
        assert "password" not in user
        assert "hashedPassword" not in user

        claims = decode_access_token(data["token"])
        assert claims["sub"] == user["id"]
        assert claims["email"] == "jane@example.com"
        assert claims["displayName"] == "Jane Doe"

    async def test_email_is_normalized(self, client: AsyncClient, sample_user_data: dict):
        sample_user_data["email"] = "Jane@Example.COM"
        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "jane@example.com"

    async def test_register_duplicate_email(
        self,
        client: AsyncClient,
        registered_user: dict,
        sample_user_data: dict
    ):
        sample_user_data["displayName"] = "Somebody Else"
        sample_user_data["email"] = "JANE@example.com"

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    async def test_register_duplicate_slug(
        self,
        client: AsyncClient,
        registered_user: dict,
        sample_user_data: dict
    ):
        sample_user_data["displayName"] = "  JANE   doe! "
        sample_user_data["email"] = "another@example.com"

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        assert response.json()["detail"] == "Display name already taken. Please choose a different name."

    async def test_register_name_without_slug(self, client: AsyncClient, sample_user_data: dict):
        sample_user_data["displayName"] = "!!!"

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        assert "letter or digit" in response.json()["detail"]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("email", "invalid-email"),
            ("password", "short"),
            ("displayName", "   "),
        ],
    )
    async def test_register_invalid_fields(
        self,
        client: AsyncClient,
        sample_user_data: dict,
        field: str,
        value: str
    ):
        sample_user_data[field] = value

        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 400
        assert response.json()["detail"]

    async def test_register_missing_field(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={"email": "jane@example.com"})
        assert response.status_code == 400


# ================================
# Login Endpoint Tests
# ================================

@pytest.mark.asyncio
class TestLogin:
    """Test login endpoint."""

    async def test_login_success(self, client: AsyncClient, registered_user: dict):
        response = await client.post(
            "/api/auth/login",
            json={"email": "jane@example.com", "password": "secret1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == registered_user["user"]["id"]
        assert decode_access_token(data["token"])["sub"] == registered_user["user"]["id"]

    async def test_login_email_case_insensitive(self, client: AsyncClient, registered_user: dict):
        response = await client.post(
            "/api/auth/login",
            json={"email": "  JANE@example.com ", "password": "secret1"},
        )
        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, registered_user: dict):
        response = await client.post(
            "/api/auth/login",
            json={"email": "jane@example.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    async def test_login_user_not_found(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "secret1"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"


# ================================
# Verify Endpoint Tests
# ================================

@pytest.mark.asyncio
class TestVerify:
    """Test credential verification."""

    async def test_verify_valid_token(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/auth/verify", json={"token": registered_user["token"]})

        assert response.status_code == 200
        assert response.json()["user"]["slug"] == "jane-doe"

    async def test_verify_expired_token(self, client: AsyncClient, expired_token: str):
        response = await client.post("/api/auth/verify", json={"token": expired_token})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid authentication token"

    async def test_verify_garbage(self, client: AsyncClient):
        response = await client.post("/api/auth/verify", json={"token": "garbage"})
        assert response.status_code == 401

    async def test_verify_token_of_unknown_user(self, client: AsyncClient):
        token = create_access_token({"sub": "usr_0f8fad5bd9cb469fa16570867728950e"})
        response = await client.post("/api/auth/verify", json={"token": token})
        assert response.status_code == 401


# ================================
# Get Current User Tests
# ================================

@pytest.mark.asyncio
class TestGetCurrentUser:
    """Test get current user endpoint."""

    async def test_get_current_user_success(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict
    ):
        response = await client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        for field in ("id", "displayName", "email", "slug"):
            assert data[field] == registered_user["user"][field]

    async def test_get_current_user_no_token(self, client: AsyncClient):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication token required"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_get_current_user_expired_token(self, client: AsyncClient, expired_token: str):
        response = await client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {expired_token}"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid authentication token"
