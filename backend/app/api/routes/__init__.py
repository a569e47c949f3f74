"""
API route modules.

Import all route modules here for easy access.
"""

from app.api.routes import auth, editor, profile

__all__ = ["auth", "editor", "profile"]
