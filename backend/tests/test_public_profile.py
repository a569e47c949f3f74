"""
Tests for resolving a public URL segment to a page.
"""

import pytest
import pytest_asyncio

from app.core.security import get_password_hash
from app.models import User
from app.schemas.profile import LinkInput, ProfileData
from app.schemas.theme import ThemeSettings
from app.services.profile_store import ProfileStore
from app.services.public_profile import resolve_public_profile


@pytest_asyncio.fixture
async def jane(db_session, store: ProfileStore) -> User:
    """Registered user with a saved page."""
    user = User(
        display_name="Jane Doe",
        email="jane@example.com",
        hashed_password=get_password_hash("secret1"),
        slug="jane-doe",
    )
    db_session.add(user)
    await db_session.commit()

    await store.save_profile(
        user.id,
        ProfileData(user_id=user.id, name="Jane Doe"),
        [LinkInput(id="l1", title="Blog", url="https://jane.test")],
        ThemeSettings(),
    )
    return user


@pytest.mark.asyncio
class TestResolvePublicProfile:

    async def test_by_user_id(self, store: ProfileStore, jane: User):
        page = await resolve_public_profile(store, jane.id)
        assert page.profile.user_id == jane.id

    async def test_by_slug(self, store: ProfileStore, jane: User):
        page = await resolve_public_profile(store, "jane-doe")
        assert page.profile.user_id == jane.id
        assert page.links[0].title == "Blog"

    async def test_slug_is_case_insensitive(self, store: ProfileStore, jane: User):
        page = await resolve_public_profile(store, "Jane-Doe")
        assert page.profile.user_id == jane.id

    async def test_registered_user_without_page(self, store: ProfileStore, db_session):
        db_session.add(User(
            display_name="No Page",
            email="nopage@example.com",
            hashed_password=get_password_hash("secret1"),
            slug="no-page",
        ))
        await db_session.commit()

        assert await resolve_public_profile(store, "no-page") is None

    @pytest.mark.parametrize(
        "segment",
        [
            "nobody",
            "usr_0f8fad5bd9cb469fa16570867728950e",
            "usr_not-an-id",
            "",
            "   ",
        ],
    )
    async def test_misses(self, store: ProfileStore, jane: User, segment: str):
        assert await resolve_public_profile(store, segment) is None
