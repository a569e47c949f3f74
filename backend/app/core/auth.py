"""
Authentication dependencies for FastAPI.

This module provides:
- The bearer token scheme (Authorization: Bearer <jwt>)
- Credential checks used by the login route
- Dependencies that resolve the current user for protected routes

Two ways a credential reaches us:

1. Authorization header (every protected route)
2. A ``token`` field in the JSON body (profile save only; the editor posts
   it alongside the profile payload)

``user_from_token`` handles both; the dependencies below wrap it for the
header-only case.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthError
from app.core.logging import get_logger
from app.core.security import decode_access_token, verify_password
from app.db.deps import get_db
from app.models.user import User

logger = get_logger(__name__)

# ================================
# Bearer Scheme
# ================================

# auto_error=False: a missing header yields None instead of FastAPI's own
# 401, so every route reports the same messages.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)

TOKEN_REQUIRED = "Authentication token required"
TOKEN_INVALID = "Invalid authentication token"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ================================
# Authentication Functions
# ================================

async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """
    Authenticate a user by email and password.

    The email is normalized the same way registration stores it. A wrong
    email and a wrong password both return None so the caller can't tell
    which one failed.
    """
    result = await db.execute(
        select(User).where(User.email == email.strip().lower())
    )
    user = result.scalar_one_or_none()

    if user is None:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


async def user_from_token(db: AsyncSession, token: str | None) -> User:
    """
    Resolve a credential to a registered user.

    Raises:
        AuthError: token missing, expired, tampered, or its user is gone
    """
    if not token:
        raise AuthError(TOKEN_REQUIRED)

    payload = decode_access_token(token)
    if payload is None:
        raise AuthError(TOKEN_INVALID)

    user_id = payload.get("sub")
    if not isinstance(user_id, str):
        raise AuthError(TOKEN_INVALID)

    user = await db.get(User, user_id)
    if user is None:
        logger.warning("token_user_missing", user_id=user_id)
        raise AuthError(TOKEN_INVALID)

    return user


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the current authenticated user from the Authorization header.

    Usage in routes:
        @router.get("/me")
        async def me(current_user: User = Depends(get_current_user)):
            ...

    Raises:
        HTTPException 401: token missing, invalid, expired or user not found
    """
    try:
        return await user_from_token(db, token)
    except AuthError as e:
        raise _unauthorized(e.message)
