"""
Security utilities for authentication.

This module provides:
- Password hashing and verification (bcrypt)
- Signed session credentials (JWT via python-jose)

The credential is opaque to clients. It carries the user id in ``sub`` plus
the email and display name so the editor can greet the user without an extra
round trip, and it expires after ACCESS_TOKEN_EXPIRE_MINUTES (7 days).
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings

# ================================
# Password Hashing
# ================================

# bcrypt only looks at the first 72 bytes of input; longer passwords are
# truncated here so hashing never raises on newer bcrypt releases.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a stored bcrypt hash.

    Returns False (never raises) when the stored hash is malformed.

    Example:
        >>> hashed = get_password_hash("secret")
        >>> verify_password("secret", hashed)
        True
        >>> verify_password("wrong", hashed)
        False
    """
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a plaintext password with a fresh random salt.

    Two hashes of the same password differ; both verify.
    """
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
    return hashed.decode("utf-8")


# ================================
# Session Credentials (JWT)
# ================================

ALGORITHM = settings.JWT_ALGORITHM


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT.

    Args:
        data: Claims to include; should contain "sub" (the user id)
        expires_delta: Lifetime of the token. Defaults to
                       ACCESS_TOKEN_EXPIRE_MINUTES from settings.
                       A negative delta yields an already expired token,
                       which the tests use.

    Returns:
        Encoded JWT string
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    to_encode.update({"exp": now + expires_delta, "iat": now})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user_id: str, email: str, display_name: str) -> str:
    """Issue the session credential handed out by register and login."""
    return create_access_token(
        {"sub": user_id, "email": email, "displayName": display_name}
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify a JWT.

    Checks signature, algorithm and expiry.

    Returns:
        The claims dict if valid, None if expired, tampered or malformed
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
