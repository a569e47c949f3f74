"""
User identifiers and public slugs.

Two namespaces reach the public page route:

* user ids: ``usr_`` followed by 32 lowercase hex characters
* slugs: ``[a-z0-9]`` runs joined by single hyphens, derived from the
  display name at registration

A slug can never contain an underscore, so the two namespaces are disjoint
and ``looks_like_user_id`` is enough to decide how a segment is resolved.
"""

import re
import uuid

USER_ID_PREFIX = "usr_"
USER_ID_PATTERN = re.compile(r"^usr_[0-9a-f]{32}$")

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RUNS = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


def new_user_id() -> str:
    """Generate a fresh user identifier."""
    return f"{USER_ID_PREFIX}{uuid.uuid4().hex}"


def looks_like_user_id(value: str) -> bool:
    return bool(USER_ID_PATTERN.fullmatch(value))


def generate_slug(display_name: str) -> str:
    """
    Derive a URL slug from a display name.

    Steps:
        1. lowercase
        2. drop everything except a-z, 0-9 and whitespace
        3. trim
        4. whitespace runs -> "-"
        5. collapse repeated "-"
        6. strip leading/trailing "-"

    Hyphens already in the input are dropped in step 2, so
    "Mary-Jane Watson" becomes "maryjane-watson". Names with no ASCII
    letters or digits produce an empty string; callers must reject that.

    Examples:
        >>> generate_slug("Jane Doe")
        'jane-doe'
        >>> generate_slug("  Hello,   World!! ")
        'hello-world'
    """
    slug = _DISALLOWED_CHARS.sub("", display_name.lower())
    slug = slug.strip()
    slug = _WHITESPACE_RUNS.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")
