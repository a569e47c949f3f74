"""
Authentication endpoints.

This module provides:
- User registration (display name, email, password)
- Login (JSON email + password)
- Credential verification
- Get current user

All three issuing/checking endpoints return the user without the password
hash. Tokens are JWTs valid for 7 days.

References:
-----------
- FastAPI Security: https://fastapi.tiangolo.com/tutorial/security/oauth2-jwt/
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import authenticate_user, get_current_user, user_from_token
from app.core.exceptions import AuthError
from app.core.identifiers import generate_slug
from app.core.logging import get_logger
from app.core.security import create_user_token, get_password_hash
from app.db.deps import get_db
from app.models.user import User
from app.schemas.auth import (
    TokenVerify,
    UserLogin,
    UserRegister,
    UserResponse,
    UserWithToken,
    VerifiedUser,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

EMAIL_TAKEN = "Email already registered"
SLUG_TAKEN = "Display name already taken. Please choose a different name."
INVALID_CREDENTIALS = "Invalid email or password"


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        display_name=user.display_name,
        email=user.email,
        slug=user.slug,
        created_at=user.created_at,
    )


def issue_token(user: User) -> str:
    return create_user_token(user.id, user.email, user.display_name)


# ================================
# User Registration
# ================================

@router.post("/register", response_model=UserWithToken, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    Registration Flow:
    ------------------
    1. Normalize email (trim + lowercase), derive slug from display name
    2. Reject an empty slug, a taken email or a taken slug (400)
    3. Hash password (bcrypt) and insert the user
    4. Return user info + JWT (auto-login)

    Raises:
        HTTPException 400: invalid data, email taken, display name taken
    """
    email = user_data.email.strip().lower()
    slug = generate_slug(user_data.display_name)

    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Display name must contain at least one letter or digit",
        )

    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        logger.warning("registration_rejected", reason="email_taken")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_TAKEN)

    existing = await db.execute(select(User.id).where(User.slug == slug))
    if existing.scalar_one_or_none() is not None:
        logger.warning("registration_rejected", reason="slug_taken", slug=slug)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=SLUG_TAKEN)

    new_user = User(
        display_name=user_data.display_name,
        email=email,
        hashed_password=get_password_hash(user_data.password),
        slug=slug,
    )
    db.add(new_user)

    try:
        await db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        await db.rollback()
        logger.warning("registration_rejected", reason="unique_violation", slug=slug)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{EMAIL_TAKEN} or display name already taken",
        )

    logger.info("user_registered", user_id=new_user.id, slug=slug)

    return UserWithToken(user=user_response(new_user), token=issue_token(new_user))


# ================================
# Login
# ================================

@router.post("/login", response_model=UserWithToken)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with email and password.

    Request:
        {"email": "jane@example.com", "password": "secret1"}

    Raises:
        HTTPException 401: unknown email or wrong password (same message)
    """
    user = await authenticate_user(db, credentials.email, credentials.password)

    if user is None:
        logger.warning("login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("login_successful", user_id=user.id)

    return UserWithToken(user=user_response(user), token=issue_token(user))


# ================================
# Verify
# ================================

@router.post("/verify", response_model=VerifiedUser)
async def verify(
    payload: TokenVerify,
    db: AsyncSession = Depends(get_db)
):
    """
    Check a credential and return its user.

    Raises:
        HTTPException 401: token invalid, expired, or user gone
    """
    try:
        user = await user_from_token(db, payload.token)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return VerifiedUser(user=user_response(user))


# ================================
# Get Current User
# ================================

@router.get("/me", response_model=UserResponse)
async def read_users_me(
    current_user: User = Depends(get_current_user)
):
    """
    Get the authenticated user.

    Request:
        GET /api/auth/me
        Authorization: Bearer eyJhbGciOi...
    """
    return user_response(current_user)
