"""
Profile endpoint tests.

Tests for:
- Saving a page (auth, validation, defaults, theme merging)
- Public lookup by user id and slug
- Presentation values for a public page
- Slug availability
- Deleting a page
- Listing and health
"""

import pytest
from httpx import AsyncClient

from app.services.profile_store import ProfileStore


@pytest.fixture
def page_payload() -> dict:
    return {
        "profile": {"name": "Jane Doe", "bio": "Writer"},
        "links": [
            {"id": "l1", "title": "Blog", "url": "https://jane.test/blog"},
            {"id": "l2", "title": "Shop", "url": "https://jane.test/shop"},
        ],
        "themeSettings": {"colorTheme": "rose", "effects": {"cardOpacity": 5}},
    }


async def save_page(client: AsyncClient, headers: dict, payload: dict):
    return await client.post("/api/profile/save", json=payload, headers=headers)


# ================================
# Save
# ================================

@pytest.mark.asyncio
class TestSaveProfile:

    async def test_save_with_bearer_token(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        page_payload: dict
    ):
        response = await save_page(client, auth_headers, page_payload)

        assert response.status_code == 200
        assert response.json() == {
            "userId": registered_user["user"]["id"],
            "shareUrl": "https://links.test/jane-doe",
            "slug": "jane-doe",
        }

    async def test_save_with_body_token(self, client: AsyncClient, registered_user: dict, page_payload: dict):
        page_payload["token"] = registered_user["token"]

        response = await save_page(client, {}, page_payload)

        assert response.status_code == 200

    async def test_save_without_token(self, client: AsyncClient, page_payload: dict):
        response = await save_page(client, {}, page_payload)

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication token required"

    async def test_save_with_expired_token(self, client: AsyncClient, expired_token: str, page_payload: dict):
        response = await save_page(client, {"Authorization": f"Bearer {expired_token}"}, page_payload)

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid authentication token"

    async def test_auth_is_checked_before_body(self, client: AsyncClient):
        response = await save_page(client, {}, {"profile": {}})
        assert response.status_code == 401

    async def test_auth_is_checked_before_links(self, client: AsyncClient):
        body = {"token": 42, "profile": {"name": "Jane"}, "links": [{"title": "No id"}, "junk"]}

        response = await save_page(client, {}, body)

        assert response.status_code == 401

    @pytest.mark.parametrize("profile", [{}, {"name": ""}, {"name": "   "}, {"bio": "only a bio"}])
    async def test_name_required(self, client: AsyncClient, auth_headers: dict, profile: dict):
        response = await save_page(client, auth_headers, {"profile": profile})

        assert response.status_code == 400
        assert response.json()["detail"] == "Profile name is required"

    async def test_defaults_applied(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        store: ProfileStore
    ):
        response = await save_page(client, auth_headers, {"profile": {"name": "Jane"}})
        assert response.status_code == 200

        page = await store.get_profile(registered_user["user"]["id"])
        assert page.profile.bio == ""
        assert page.profile.avatar_url == ""
        assert page.profile.verified is False
        assert page.profile.secondary_bg == "bg-secondary"
        assert page.links == []
        assert page.theme.color_theme == "default"

    async def test_theme_merged_and_clamped(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        page_payload: dict,
        store: ProfileStore
    ):
        await save_page(client, auth_headers, page_payload)

        theme = await store.get_theme(registered_user["user"]["id"])
        assert theme.color_theme == "rose"
        assert theme.effects.card_opacity == 1.0
        assert theme.font_colors.bio == "#6b7280"

    @pytest.mark.parametrize(
        "profile, field",
        [
            ({"name": "J" * 101}, "profile.name"),
            ({"name": "Jane", "bio": "b" * 501}, "profile.bio"),
            ({"name": "Jane", "secondaryBg": "s" * 51}, "profile.secondaryBg"),
            ({"name": "Jane", "avatarUrl": "https://a.test/" + "a" * 2048}, "profile.avatarUrl"),
        ],
    )
    async def test_fields_longer_than_storage(
        self,
        client: AsyncClient,
        auth_headers: dict,
        profile: dict,
        field: str
    ):
        response = await save_page(client, auth_headers, {"profile": profile})

        assert response.status_code == 400
        assert field in response.json()["detail"]

    async def test_unusable_theme_values_get_defaults(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        store: ProfileStore
    ):
        response = await save_page(client, auth_headers, {
            "profile": {"name": "Jane"},
            "themeSettings": {"colorTheme": "c" * 60, "fontColors": {"bio": "#123456\n", "linkUrl": "#abcdef"}},
        })

        assert response.status_code == 200
        theme = await store.get_theme(registered_user["user"]["id"])
        assert theme.color_theme == "default"
        assert theme.font_colors.bio == "#6b7280"
        assert theme.font_colors.link_url == "#abcdef"

    async def test_invalid_link(self, client: AsyncClient, auth_headers: dict, page_payload: dict):
        page_payload["links"].append({"title": "No id", "url": "https://x.test"})

        response = await save_page(client, auth_headers, page_payload)

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "link, message",
        [
            ({"id": "x", "title": "Docs", "url": "not a url"}, "needs a valid URL"),
            ({"id": "x", "title": "Files", "url": "ftp://files.test"}, "needs a valid URL"),
            ({"id": "x", "title": "   ", "url": "https://x.test"}, "needs a title"),
        ],
    )
    async def test_link_rules(
        self,
        client: AsyncClient,
        auth_headers: dict,
        page_payload: dict,
        link: dict,
        message: str
    ):
        page_payload["links"].append(link)

        response = await save_page(client, auth_headers, page_payload)

        assert response.status_code == 400
        assert message in response.json()["detail"]
        assert (await client.get("/api/profile/jane-doe")).status_code == 404


# ================================
# Public Page
# ================================

@pytest.mark.asyncio
class TestPublicProfile:

    async def test_by_slug(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        page_payload: dict
    ):
        await save_page(client, auth_headers, page_payload)

        response = await client.get("/api/profile/jane-doe")

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["userId"] == registered_user["user"]["id"]
        assert data["profile"]["name"] == "Jane Doe"
        assert data["profile"]["bio"] == "Writer"
        assert data["links"] == [
            {"id": "l1", "title": "Blog", "url": "https://jane.test/blog", "order": 0},
            {"id": "l2", "title": "Shop", "url": "https://jane.test/shop", "order": 1},
        ]
        assert data["theme"]["colorTheme"] == "rose"
        assert data["theme"]["fontColors"]["displayName"] == "#000000"
        assert data["theme"]["effects"]["cardOpacity"] == 1.0

    async def test_by_user_id(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        page_payload: dict
    ):
        await save_page(client, auth_headers, page_payload)

        response = await client.get(f"/api/profile/{registered_user['user']['id']}")

        assert response.status_code == 200
        assert response.json()["profile"]["name"] == "Jane Doe"

    async def test_save_replaces_links(
        self,
        client: AsyncClient,
        auth_headers: dict,
        page_payload: dict
    ):
        await save_page(client, auth_headers, page_payload)
        page_payload["links"] = [{"id": "l9", "title": "Only", "url": "https://only.test"}]
        await save_page(client, auth_headers, page_payload)

        response = await client.get("/api/profile/jane-doe")

        assert [link["id"] for link in response.json()["links"]] == ["l9"]

    async def test_not_found(self, client: AsyncClient):
        response = await client.get("/api/profile/nobody")

        assert response.status_code == 404
        assert response.json() == {"detail": "Profile not found"}

    async def test_registered_without_page(self, client: AsyncClient, registered_user: dict):
        response = await client.get("/api/profile/jane-doe")
        assert response.status_code == 404

    async def test_presentation(self, client: AsyncClient, auth_headers: dict, page_payload: dict):
        await save_page(client, auth_headers, page_payload)

        response = await client.get("/api/profile/jane-doe/presentation")

        assert response.status_code == 200
        data = response.json()
        assert data["colorTheme"] == "rose"
        assert data["primary"] == "347 77% 50%"
        assert data["cssVariables"]["--card-opacity"] == "1"

    async def test_presentation_not_found(self, client: AsyncClient):
        response = await client.get("/api/profile/nobody/presentation")
        assert response.status_code == 404


# ================================
# Availability
# ================================

@pytest.mark.asyncio
class TestAvailability:

    async def test_free_name(self, client: AsyncClient):
        response = await client.post("/api/profile/check-availability", json={"name": "Someone New"})

        assert response.status_code == 200
        assert response.json() == {"userId": "someone-new", "available": True}

    async def test_taken_by_registered_user(self, client: AsyncClient, registered_user: dict):
        response = await client.post("/api/profile/check-availability", json={"name": "JANE doe"})

        assert response.json() == {"userId": "jane-doe", "available": False}

    async def test_taken_by_stored_page(self, client: AsyncClient, store: ProfileStore):
        from app.schemas.profile import ProfileData
        from app.schemas.theme import ThemeSettings

        await store.save_profile("page-owner", ProfileData(user_id="page-owner", name="x"), [], ThemeSettings())

        response = await client.post("/api/profile/check-availability", json={"name": "Page Owner"})

        assert response.json() == {"userId": "page-owner", "available": False}

    async def test_name_without_slug(self, client: AsyncClient):
        response = await client.post("/api/profile/check-availability", json={"name": "!!!"})

        assert response.json() == {"userId": "", "available": False}

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "  "}])
    async def test_name_required(self, client: AsyncClient, body: dict):
        response = await client.post("/api/profile/check-availability", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Name is required"


# ================================
# Delete
# ================================

@pytest.mark.asyncio
class TestDeleteProfile:

    async def test_delete_own_page(
        self,
        client: AsyncClient,
        auth_headers: dict,
        registered_user: dict,
        page_payload: dict
    ):
        await save_page(client, auth_headers, page_payload)
        user_id = registered_user["user"]["id"]

        response = await client.delete(f"/api/profile/{user_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert (await client.get("/api/profile/jane-doe")).status_code == 404
        # the account survives
        assert (await client.get("/api/auth/me", headers=auth_headers)).status_code == 200

    async def test_delete_someone_elses_page(
        self,
        client: AsyncClient,
        auth_headers: dict,
        other_user: dict
    ):
        response = await client.delete(f"/api/profile/{other_user['user']['id']}", headers=auth_headers)

        assert response.status_code == 403

    async def test_delete_requires_auth(self, client: AsyncClient, registered_user: dict):
        response = await client.delete(f"/api/profile/{registered_user['user']['id']}")
        assert response.status_code == 401


# ================================
# Listing / Health
# ================================

@pytest.mark.asyncio
class TestListingAndHealth:

    async def test_list_profiles(self, client: AsyncClient, auth_headers: dict, page_payload: dict):
        await save_page(client, auth_headers, page_payload)

        response = await client.get("/api/profile")

        assert response.status_code == 200
        assert [profile["name"] for profile in response.json()] == ["Jane Doe"]

    async def test_list_limit_bounds(self, client: AsyncClient):
        response = await client.get("/api/profile", params={"limit": 0})
        assert response.status_code == 400

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["app_name"] == "LinkPage"
        assert data["theme_cache"] == "memory"


# ================================
# End to End
# ================================

@pytest.mark.asyncio
async def test_register_save_and_resolve_by_slug(client: AsyncClient, store: ProfileStore):
    registered = await client.post(
        "/api/auth/register",
        json={"displayName": "Jane Doe", "email": "jane@example.com", "password": "secret1"},
    )
    assert registered.json()["user"]["slug"] == "jane-doe"

    saved = await client.post(
        "/api/profile/save",
        json={
            "token": registered.json()["token"],
            "profile": {"name": "Jane", "bio": "hi"},
            "links": [{"id": "gh", "title": "GitHub", "url": "https://github.com/jane"}],
        },
    )
    assert saved.status_code == 200

    page = await store.get_profile_by_slug("jane-doe")
    assert page.profile.name == "Jane"
    assert page.links[0].order == 0
    assert page.theme.color_theme == "default"
