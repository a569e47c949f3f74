"""
Environment variable validation and security checks.

Runs at startup (app.main lifespan) and refuses to boot on configuration
that would be unsafe or cannot work.
"""

import sys
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_DATABASE_SCHEMES = ("postgresql+asyncpg", "sqlite+aiosqlite")
PLACEHOLDER_MARKERS = ("change", "your-", "example")


def validate_secret_key(key_name: str, key_value: Optional[str], min_length: int = 32) -> List[str]:
    """
    Validate that a secret key meets security requirements.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not key_value:
        errors.append(f"{key_name} is not set")
        return errors

    if len(key_value) < min_length:
        errors.append(
            f"{key_name} is too short (must be at least {min_length} characters)"
        )

    if any(marker in key_value.lower() for marker in PLACEHOLDER_MARKERS):
        errors.append(
            f"{key_name} appears to be a placeholder value - update with a real secret key"
        )

    return errors


def validate_database_url() -> List[str]:
    """
    Validate database URL configuration.

    PostgreSQL (asyncpg) everywhere except tests, which may use
    sqlite+aiosqlite.
    """
    errors = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")
        return errors

    scheme = settings.DATABASE_URL.split("://", 1)[0]
    if scheme not in SUPPORTED_DATABASE_SCHEMES:
        errors.append(
            "DATABASE_URL must use an async driver "
            "(postgresql+asyncpg://... or sqlite+aiosqlite://...)"
        )

    if settings.is_production and settings.uses_sqlite:
        errors.append("DATABASE_URL must point to PostgreSQL in production")

    return errors


def validate_redis_url() -> List[str]:
    """Only checked when theme snapshots are kept in Redis."""
    errors = []

    if settings.THEME_CACHE_BACKEND != "redis":
        return errors

    if not settings.REDIS_URL:
        errors.append("REDIS_URL is not set")
        return errors

    if urlparse(settings.REDIS_URL).scheme not in ("redis", "rediss"):
        errors.append(
            "REDIS_URL must start with redis:// or rediss:// (format: redis://host:port/db)"
        )

    return errors


def validate_public_base_url() -> List[str]:
    parsed = urlparse(settings.PUBLIC_BASE_URL)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return ["PUBLIC_BASE_URL must be an absolute http(s) URL, e.g. https://links.example.org"]
    return []


def validate_production_settings() -> List[str]:
    """
    Validate production-specific settings.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not settings.is_production:
        return errors

    if settings.DEBUG:
        errors.append("DEBUG must be false in production")

    if settings.THEME_CACHE_BACKEND == "memory":
        errors.append("THEME_CACHE_BACKEND=memory is per-process; use redis in production")

    if "localhost" in ",".join(settings.ALLOWED_ORIGINS):
        logger.warning(
            "localhost_in_allowed_origins",
            message="ALLOWED_ORIGINS includes localhost in production - may be insecure"
        )

    if settings.LOG_FORMAT != "json":
        logger.warning(
            "log_format_not_json",
            message="LOG_FORMAT should be 'json' in production for better log aggregation"
        )

    return errors


def validate_environment() -> Tuple[bool, List[str]]:
    """
    Validate all environment variables.

    Returns:
        (is_valid, list_of_errors)
    """
    all_errors = []

    logger.info(
        "validating_environment",
        app_env=settings.APP_ENV,
        app_name=settings.APP_NAME
    )

    all_errors.extend(validate_secret_key("SECRET_KEY", settings.SECRET_KEY))
    all_errors.extend(validate_database_url())
    all_errors.extend(validate_redis_url())
    all_errors.extend(validate_public_base_url())
    all_errors.extend(validate_production_settings())

    if all_errors:
        logger.error(
            "environment_validation_failed",
            errors=all_errors,
            error_count=len(all_errors)
        )
        return False, all_errors

    logger.info(
        "environment_validation_successful",
        app_env=settings.APP_ENV,
        theme_cache=settings.THEME_CACHE_BACKEND,
    )
    return True, []


def validate_or_exit():
    """
    Validate environment and exit if validation fails.

    Called during application startup.
    """
    is_valid, errors = validate_environment()

    if not is_valid:
        logger.critical(
            "startup_aborted_invalid_environment",
            errors=errors
        )
        print("\nENVIRONMENT VALIDATION FAILED\n")
        print("The following configuration errors were found:\n")
        for i, error in enumerate(errors, 1):
            print(f"  {i}. {error}")
        print("\nPlease fix these errors and restart the application.")
        print("See .env.example for configuration reference.\n")
        sys.exit(1)

    logger.info("environment_validation_passed")
