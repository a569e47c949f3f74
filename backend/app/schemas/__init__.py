"""
Pydantic schemas for request/response validation.

Import all schemas here for easy access.
"""

from app.schemas.auth import (
    TokenVerify,
    UserLogin,
    UserRegister,
    UserResponse,
    UserWithToken,
    VerifiedUser,
)
from app.schemas.common import CamelModel
from app.schemas.profile import (
    AvailabilityRequest,
    AvailabilityResponse,
    DeleteProfileResponse,
    LinkData,
    LinkInput,
    ProfileData,
    ProfileInput,
    SaveProfileRequest,
    SaveProfileResponse,
    UserProfile,
)
from app.schemas.theme import FontColors, ThemeEffects, ThemeRecord, ThemeSettings

__all__ = [
    # Common
    "CamelModel",
    # Authentication
    "UserRegister",
    "UserLogin",
    "TokenVerify",
    "UserResponse",
    "UserWithToken",
    "VerifiedUser",
    # Profile
    "ProfileData",
    "LinkData",
    "UserProfile",
    "ProfileInput",
    "LinkInput",
    "SaveProfileRequest",
    "SaveProfileResponse",
    "AvailabilityRequest",
    "AvailabilityResponse",
    "DeleteProfileResponse",
    # Theme
    "FontColors",
    "ThemeEffects",
    "ThemeSettings",
    "ThemeRecord",
]
