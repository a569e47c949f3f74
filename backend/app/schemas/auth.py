"""
Authentication schemas (Pydantic models for request/response).

These schemas define:
- Request formats (what client sends)
- Response formats (what server returns)
- Data validation rules

Field names are camelCase on the wire (``displayName``, ``createdAt``).

References:
-----------
- Pydantic: https://docs.pydantic.dev/latest/
- FastAPI Request Body: https://fastapi.tiangolo.com/tutorial/body/
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.core.config import settings
from app.schemas.common import CamelModel


# ================================
# Registration / Login Requests
# ================================

class UserRegister(CamelModel):
    """
    User registration request.

    Example request:
        POST /api/auth/register
        {
            "displayName": "Jane Doe",
            "email": "jane@example.com",
            "password": "secret1"
        }

    The display name also decides the public URL: "Jane Doe" -> /jane-doe.
    """
    display_name: str = Field(
        ...,
        max_length=100,
        description="Name shown on the page; its slug becomes the public URL",
        examples=["Jane Doe"]
    )
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["jane@example.com"]
    )
    password: str = Field(
        ...,
        min_length=settings.PASSWORD_MIN_LENGTH,
        max_length=128,
        description=f"Password (minimum {settings.PASSWORD_MIN_LENGTH} characters)",
    )

    @field_validator("display_name")
    @classmethod
    def display_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Display name is required")
        return v


class UserLogin(CamelModel):
    """
    User login request.

    Email shape is not validated here: any unknown email simply fails
    with the generic credentials error.
    """
    email: str = Field(..., min_length=1, examples=["jane@example.com"])
    password: str = Field(..., min_length=1)


class TokenVerify(CamelModel):
    """Credential to check, as returned by register/login."""
    token: str = Field(..., min_length=1)


# ================================
# Responses
# ================================

class UserResponse(CamelModel):
    """
    Public user information. Never includes the password hash.

    Example response:
        {
            "id": "usr_0f8fad5bd9cb469fa16570867728950e",
            "displayName": "Jane Doe",
            "email": "jane@example.com",
            "slug": "jane-doe",
            "createdAt": "2025-01-01T12:00:00Z"
        }
    """
    id: str = Field(..., description="User's unique ID")
    display_name: str
    email: str
    slug: str = Field(..., description="Public page path segment")
    created_at: Optional[datetime] = None


class UserWithToken(CamelModel):
    """Returned by register and login."""
    user: UserResponse
    token: str = Field(..., description="JWT to send as Authorization: Bearer <token>")


class VerifiedUser(CamelModel):
    """Returned by verify."""
    user: UserResponse
