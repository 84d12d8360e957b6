"""Theme catalog contents and lookups."""

from guesso.core.domain_types import ORDINARY_ITEM_COUNT, ThemeCategory
from guesso.core.theme_catalog import (
    FETISH_THEMES, FREE_THEMES, PERSON_RANK_GENRES, PERSON_RANK_THEMES, THEMES,
    get_theme, get_theme_item, themes_by_genre,
)


def test_theme_ids_unique():
    ids = [t.id for t in THEMES]
    assert len(ids) == len(set(ids))


def test_ordinary_themes_have_seven_distinct_items():
    for theme in FREE_THEMES + FETISH_THEMES:
        ids = theme.item_ids()
        assert len(ids) == ORDINARY_ITEM_COUNT
        assert len(set(ids)) == ORDINARY_ITEM_COUNT


def test_free_themes():
    assert [t.id for t in FREE_THEMES] == ["love", "life", "drinks"]
    assert all(t.is_free and not t.requires_verification for t in FREE_THEMES)


def test_gated_categories():
    assert all(t.requires_verification for t in FETISH_THEMES)
    assert len(PERSON_RANK_THEMES) == 12
    for theme in PERSON_RANK_THEMES:
        assert theme.is_person_rank
        assert theme.items == ()
        assert theme.requires_entitlement
        assert theme.category == ThemeCategory.PERSON_RANK


def test_genres_cover_every_person_rank_theme():
    grouped = [tid for g in PERSON_RANK_GENRES for tid in g.theme_ids]
    assert sorted(grouped) == sorted(t.id for t in PERSON_RANK_THEMES)
    assert [t.id for t in themes_by_genre("roast")] == [
        "pr-cheat", "pr-drunk", "pr-selfish", "pr-heartbreak",
    ]
    assert themes_by_genre("nope") == []


def test_lookups():
    assert get_theme("life").title == "What matters most in life"
    assert get_theme("missing") is None
    assert get_theme_item("drinks", "wine").label == "Wine"
    assert get_theme_item("drinks", "milk") is None
    assert get_theme_item("missing", "wine") is None


def test_to_dict():
    data = get_theme("love").to_dict()
    assert data["category"] == "love"
    assert data["items"][0] == {"id": "face", "emoji": "👀", "label": "Looks"}
