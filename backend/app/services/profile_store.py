"""
Profile Store

Persistence for the public page aggregate: one profile, an ordered list of
links and one theme, all keyed by the owner's user id.

Write Semantics:
----------------
save_profile runs in ONE transaction:

    1. upsert profile by user_id     (INSERT ... ON CONFLICT DO UPDATE)
    2. delete every link of user_id
    3. insert the new links with order = list index
    4. upsert theme by user_id

Either all of it commits or none of it does. Links are replaced, never
merged. Concurrent saves for the same user are last-write-wins.
created_at survives updates; updated_at is restamped on every save.

Read Semantics:
---------------
get_profile loads profile, theme and links with a single outer-join
SELECT. One statement reads one snapshot, so a reader sees a concurrent
save either not at all or completely, never half of it. No profile
row means "no page" (None). A missing theme row is not an error: the
compiled-in defaults are returned, stamped with the user id, without being
written.

Errors:
-------
Any SQLAlchemy failure is logged and re-raised as PersistenceError.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import PersistenceError
from app.core.logging import get_logger
from app.db.base import utcnow
from app.models import Link, Profile, Theme, User
from app.schemas.profile import LinkData, LinkInput, ProfileData, UserProfile
from app.schemas.theme import ThemeRecord, ThemeSettings
from app.services.theme.merge import merge_theme_settings

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50

# Columns never touched by an upsert's UPDATE branch
_IMMUTABLE_ON_UPSERT = frozenset({"id", "user_id", "created_at"})


class ProfileStore:
    """
    Transactional access to profile, links and theme records.

    Every public method opens its own session(s) from ``session_factory``,
    so one store instance can be shared across requests.

    Usage:
        store = ProfileStore(AsyncSessionLocal)
        await store.save_profile(user.id, profile, links, theme)
        page = await store.get_profile(user.id)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # ================================
    # Helpers
    # ================================

    @asynccontextmanager
    async def _session(self, operation: str, **context: Any) -> AsyncIterator[AsyncSession]:
        """Session whose storage errors surface as PersistenceError."""
        try:
            async with self.session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(
                "profile_store_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **context,
            )
            raise PersistenceError(f"Failed to {operation.replace('_', ' ')}") from e

    @staticmethod
    async def _upsert(session: AsyncSession, model: type, values: dict[str, Any]) -> None:
        """INSERT ... ON CONFLICT (user_id) DO UPDATE, in the session's dialect."""
        dialect = session.bind.dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(model)
        elif dialect == "sqlite":
            stmt = sqlite.insert(model)
        else:
            raise PersistenceError(f"Upsert not supported for dialect '{dialect}'")

        stmt = stmt.values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[model.user_id],
            set_={
                key: stmt.excluded[key]
                for key in values
                if key not in _IMMUTABLE_ON_UPSERT
            },
        )
        await session.execute(stmt)

    @staticmethod
    def _theme_values(theme: ThemeSettings) -> dict[str, Any]:
        return {
            "color_theme": theme.color_theme,
            "gradient": theme.gradient,
            "pattern": theme.pattern,
            "pattern_color": theme.pattern_color,
            "font": theme.font,
            "font_colors": theme.font_colors.model_dump(by_alias=True),
            "button_style": theme.button_style,
            "border_radius": theme.border_radius,
            "background_color": theme.background_color,
            "background_gradient": theme.background_gradient,
            "background_image": theme.background_image,
            "effects": theme.effects.model_dump(by_alias=True),
        }

    @staticmethod
    def _theme_record(user_id: str, row: Optional[Theme]) -> ThemeRecord:
        """Persisted theme merged over defaults, or plain defaults if absent."""
        if row is None:
            return ThemeRecord(user_id=user_id, **ThemeSettings().model_dump())

        merged = merge_theme_settings({
            "colorTheme": row.color_theme,
            "gradient": row.gradient,
            "pattern": row.pattern,
            "patternColor": row.pattern_color,
            "font": row.font,
            "fontColors": row.font_colors,
            "buttonStyle": row.button_style,
            "borderRadius": row.border_radius,
            "backgroundColor": row.background_color,
            "backgroundGradient": row.background_gradient,
            "backgroundImage": row.background_image,
            "effects": row.effects,
        })
        return ThemeRecord(
            user_id=user_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            **merged.model_dump(),
        )

    @staticmethod
    def _profile_data(row: Profile) -> ProfileData:
        return ProfileData(
            user_id=row.user_id,
            name=row.name,
            bio=row.bio,
            avatar_url=row.avatar_url,
            verified=row.verified,
            secondary_bg=row.secondary_bg,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    # ================================
    # Writes
    # ================================

    async def save_profile(
        self,
        user_id: str,
        profile: ProfileData,
        links: Sequence[LinkInput | LinkData],
        theme: ThemeSettings,
    ) -> str:
        """
        Replace the whole page of ``user_id`` in one transaction.

        Args:
            user_id: Owner key; wins over ``profile.user_id``
            profile: Profile fields, defaults already applied
            links: Links in display order; ``order`` is reassigned from
                   the position in this sequence
            theme: Complete theme settings

        Returns:
            The user id

        Raises:
            PersistenceError: nothing was committed
        """
        now = utcnow()
        profile_values = {
            "user_id": user_id,
            "name": profile.name,
            "bio": profile.bio,
            "avatar_url": profile.avatar_url,
            "verified": profile.verified,
            "secondary_bg": profile.secondary_bg,
            "created_at": now,
            "updated_at": now,
        }
        link_rows = [
            {
                "user_id": user_id,
                "client_id": link.id,
                "title": link.title,
                "url": link.url,
                "order": index,
                "created_at": now,
                "updated_at": now,
            }
            for index, link in enumerate(links)
        ]
        theme_values = {
            "user_id": user_id,
            **self._theme_values(theme),
            "created_at": now,
            "updated_at": now,
        }

        async with self._session("save_profile", user_id=user_id) as session:
            async with session.begin():
                await self._upsert(session, Profile, profile_values)
                await session.execute(delete(Link).where(Link.user_id == user_id))
                if link_rows:
                    await session.execute(insert(Link), link_rows)
                await self._upsert(session, Theme, theme_values)

        logger.info("profile_saved", user_id=user_id, link_count=len(link_rows))
        return user_id

    async def delete_profile(self, user_id: str) -> bool:
        """
        Delete profile, links and theme of ``user_id`` in one transaction.

        Deleting a page that doesn't exist succeeds as well.

        Returns:
            True once committed

        Raises:
            PersistenceError: nothing was deleted
        """
        async with self._session("delete_profile", user_id=user_id) as session:
            async with session.begin():
                for model in (Profile, Link, Theme):
                    await session.execute(delete(model).where(model.user_id == user_id))

        logger.info("profile_deleted", user_id=user_id)
        return True

    # ================================
    # Reads
    # ================================

    async def _fetch_theme_row(self, user_id: str) -> Optional[Theme]:
        async with self._session("load_theme", user_id=user_id) as session:
            result = await session.execute(select(Theme).where(Theme.user_id == user_id))
            return result.scalar_one_or_none()

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """
        Load the page of ``user_id``.

        Returns:
            The aggregate, or None when no profile was ever saved
        """
        # one statement, so a concurrent save is seen entirely or not at all
        query = (
            select(Profile, Theme, Link)
            .select_from(Profile)
            .outerjoin(Theme, Theme.user_id == Profile.user_id)
            .outerjoin(Link, Link.user_id == Profile.user_id)
            .where(Profile.user_id == user_id)
            .order_by(Link.order)
        )
        async with self._session("load_profile", user_id=user_id) as session:
            rows = (await session.execute(query)).all()

        if not rows:
            logger.debug("profile_lookup_miss", user_id=user_id)
            return None

        profile_row, theme_row, _ = rows[0]
        links = [
            LinkData(id=link.client_id, title=link.title, url=link.url, order=link.order)
            for _, _, link in rows
            if link is not None
        ]

        return UserProfile(
            profile=self._profile_data(profile_row),
            links=links,
            theme=self._theme_record(user_id, theme_row),
        )

    async def get_profile_by_slug(self, slug: str) -> Optional[UserProfile]:
        """Resolve a registered user's slug to their page; None if unknown."""
        async with self._session("resolve_slug", slug=slug) as session:
            result = await session.execute(select(User.id).where(User.slug == slug))
            user_id = result.scalar_one_or_none()

        if user_id is None:
            logger.debug("profile_slug_miss", slug=slug)
            return None

        return await self.get_profile(user_id)

    async def get_theme(self, user_id: str) -> Optional[ThemeRecord]:
        """The persisted theme of ``user_id`` (merged over defaults), if any."""
        row = await self._fetch_theme_row(user_id)
        if row is None:
            return None
        return self._theme_record(user_id, row)

    async def is_user_id_available(self, candidate_id: str) -> bool:
        """True when no profile is stored under ``candidate_id``."""
        async with self._session("check_availability", candidate_id=candidate_id) as session:
            result = await session.execute(
                select(func.count()).select_from(Profile).where(Profile.user_id == candidate_id)
            )
            return result.scalar_one() == 0

    async def list_profiles(self, limit: int = DEFAULT_LIST_LIMIT) -> list[ProfileData]:
        """Most recently updated profiles first."""
        async with self._session("list_profiles", limit=limit) as session:
            result = await session.execute(
                select(Profile).order_by(Profile.updated_at.desc()).limit(limit)
            )
            return [self._profile_data(row) for row in result.scalars()]
