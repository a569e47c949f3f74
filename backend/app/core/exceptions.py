"""
Application error types.

Services raise these; ``app.main`` maps each family onto an HTTP status so
route handlers don't have to translate them one by one.
"""


class LinkPageError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LinkPageError):
    """Raised when caller supplied data is missing or malformed (400)."""
    pass


class AuthError(LinkPageError):
    """Raised when a credential is missing, invalid or expired (401)."""
    pass


class NotFoundError(LinkPageError):
    """Raised when the requested resource does not exist (404)."""
    pass


class PersistenceError(LinkPageError):
    """Raised when the storage backend fails; the write was not committed (500)."""
    pass
