"""
API routes initialization.

This module aggregates all API routers and provides a single router
to include in the main application.
"""

from fastapi import APIRouter

from app.api.routes import auth, editor, profile

# Create main API router
api_router = APIRouter()

# Include authentication routes
api_router.include_router(auth.router)

# Include public page / save routes
api_router.include_router(profile.router)

# Include theme editor routes
api_router.include_router(editor.router)
