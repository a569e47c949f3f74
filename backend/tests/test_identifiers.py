"""
Tests for user ids and slug generation.
"""

import re

import pytest

from app.core.identifiers import (
    USER_ID_PATTERN,
    generate_slug,
    looks_like_user_id,
    new_user_id,
)

SLUG_SHAPE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

NAMES = [
    "Jane Doe",
    "  Hello,   World!! ",
    "Mary-Jane Watson",
    "ALL CAPS NAME",
    "tab\tseparated\nname",
    "---dashes---",
    "José Álvarez",
    "R2-D2 & C-3PO",
    "a - b",
    "2024",
]


class TestGenerateSlug:
    """Test display name -> slug conversion."""

    @pytest.mark.parametrize(
        "display_name, expected",
        [
            ("Jane Doe", "jane-doe"),
            ("  Hello,   World!! ", "hello-world"),
            ("Mary-Jane Watson", "maryjane-watson"),
            ("a - b", "a-b"),
            ("José Álvarez", "jos-lvarez"),
            ("2024", "2024"),
        ],
    )
    def test_known_names(self, display_name: str, expected: str):
        assert generate_slug(display_name) == expected

    @pytest.mark.parametrize("display_name", NAMES)
    def test_output_shape(self, display_name: str):
        slug = generate_slug(display_name)
        assert slug == "" or SLUG_SHAPE.match(slug)

    @pytest.mark.parametrize("display_name", NAMES)
    def test_ignores_case_and_extra_whitespace(self, display_name: str):
        noisy = "  " + display_name.upper().replace(" ", "   ") + "\t"
        assert generate_slug(noisy) == generate_slug(display_name)

    @pytest.mark.parametrize("display_name", ["", "   ", "!!!", "日本語", "---"])
    def test_names_without_ascii_letters_or_digits(self, display_name: str):
        assert generate_slug(display_name) == ""

    def test_case_insensitive(self):
        assert generate_slug("JANE DOE") == generate_slug("jane doe")


class TestUserIds:
    """Test the tagged user id format."""

    def test_new_ids_match_pattern(self):
        user_id = new_user_id()
        assert USER_ID_PATTERN.match(user_id)
        assert len(user_id) == 36

    def test_new_ids_are_unique(self):
        assert len({new_user_id() for _ in range(100)}) == 100

    def test_slugs_never_look_like_user_ids(self):
        for name in NAMES + ["usr 0f8fad5bd9cb469fa16570867728950e"]:
            assert not looks_like_user_id(generate_slug(name))

    @pytest.mark.parametrize(
        "value",
        [
            "jane-doe",
            "usr_",
            "usr_0F8FAD5BD9CB469FA16570867728950E",
            "usr_0f8fad5bd9cb469fa16570867728950",
            "usr_0f8fad5bd9cb469fa16570867728950e0",
            "0f8fad5bd9cb469fa16570867728950e",
            "usr_0f8fad5bd9cb469fa16570867728950e\n",
        ],
    )
    def test_rejects_malformed(self, value: str):
        assert not looks_like_user_id(value)

    def test_accepts_generated(self):
        assert looks_like_user_id("usr_0f8fad5bd9cb469fa16570867728950e")
