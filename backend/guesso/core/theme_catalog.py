"""Theme Catalog: static registry of guessable item sets.

Invariants:
    - Catalog is immutable at runtime (frozen dataclasses, tuples)
    - Every ordinary theme has exactly ORDINARY_ITEM_COUNT items with unique ids
    - Person-rank themes have no items: the room's own players are ranked instead
    - Theme ids are unique across the whole catalog

Design Decisions:
    - Module-level constants over DB seed: themes ship with the code, no migration to add one
    - Gating (verification / premium entitlement) is derived from category + is_free,
      not stored per theme, so the dispatcher asks requires_verification / requires_entitlement
"""

from dataclasses import dataclass

from guesso.core.domain_types import ThemeCategory


@dataclass(frozen=True)
class ThemeItem:
    id: str
    emoji: str
    label: str


@dataclass(frozen=True)
class Theme:
    id: str
    title: str
    emoji: str
    category: ThemeCategory
    is_free: bool
    items: tuple[ThemeItem, ...] = ()
    is_person_rank: bool = False

    @property
    def requires_verification(self) -> bool:
        """Restricted category unlocked by the messaging-bot verification channel."""
        return not self.is_free and self.category == ThemeCategory.FETISH

    @property
    def requires_entitlement(self) -> bool:
        """Premium category unlocked by the payment channel."""
        return self.category == ThemeCategory.PERSON_RANK

    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "emoji": self.emoji,
            "category": self.category.value,
            "is_free": self.is_free,
            "is_person_rank": self.is_person_rank,
            "items": [
                {"id": i.id, "emoji": i.emoji, "label": i.label} for i in self.items
            ],
        }


@dataclass(frozen=True)
class Genre:
    id: str
    label: str
    theme_ids: tuple[str, ...]


def _items(*triples: tuple[str, str, str]) -> tuple[ThemeItem, ...]:
    return tuple(ThemeItem(id=i, emoji=e, label=label) for i, e, label in triples)


def _person_rank(theme_id: str, title: str, emoji: str) -> Theme:
    return Theme(
        id=theme_id, title=title, emoji=emoji,
        category=ThemeCategory.PERSON_RANK, is_free=False, is_person_rank=True,
    )


# ─── Free themes ─────────────────────────────────────────────────

FREE_THEMES: tuple[Theme, ...] = (
    Theme(
        id="love", title="What I look for in a partner", emoji="💕",
        category=ThemeCategory.LOVE, is_free=True,
        items=_items(
            ("face", "👀", "Looks"),
            ("personality", "💝", "Personality"),
            ("height", "📏", "Height"),
            ("income", "💰", "Income"),
            ("chemistry", "🔥", "Chemistry"),
            ("drinking", "🍻", "Drinking habits"),
            ("frequency", "📅", "How often we meet"),
        ),
    ),
    Theme(
        id="life", title="What matters most in life", emoji="🌈",
        category=ThemeCategory.LIFE, is_free=True,
        items=_items(
            ("freedom", "🗽", "Freedom"),
            ("money", "💴", "Money"),
            ("health", "💪", "Health"),
            ("family", "👨‍👩‍👧", "Family"),
            ("work", "🏢", "Work"),
            ("friends", "👫", "Friends"),
            ("hobby", "🎨", "Hobbies"),
        ),
    ),
    Theme(
        id="drinks", title="Favourite drinks", emoji="🍺",
        category=ThemeCategory.LIGHT, is_free=True,
        items=_items(
            ("beer", "🍺", "Beer"),
            ("highball", "🥃", "Highball"),
            ("sake", "🍶", "Sake"),
            ("wine", "🍷", "Wine"),
            ("shochu", "🫗", "Shochu"),
            ("lemonsour", "🍋", "Lemon sour"),
            ("tequila", "🌵", "Tequila"),
        ),
    ),
)

# ─── Verification-gated themes ───────────────────────────────────

FETISH_THEMES: tuple[Theme, ...] = (
    Theme(
        id="fetish-female", title="Honestly, what's your type? (women)", emoji="💜",
        category=ThemeCategory.FETISH, is_free=False,
        items=_items(
            ("nape", "✨", "Nape"),
            ("collarbone", "💜", "Collarbone"),
            ("armpit", "🌸", "Underarm"),
            ("thigh", "🌙", "Thighs"),
            ("hand", "🤍", "Hands"),
            ("butt", "🍑", "Bottom"),
            ("chest", "💗", "Chest"),
        ),
    ),
    Theme(
        id="fetish-male", title="Honestly, what's your type? (men)", emoji="💙",
        category=ThemeCategory.FETISH, is_free=False,
        items=_items(
            ("hand", "✋", "Hands"),
            ("vein", "💪", "Veins"),
            ("shoulder", "🏔", "Shoulders"),
            ("pectoral", "🦾", "Chest"),
            ("adams", "🔥", "Adam's apple"),
            ("collarbone", "⚡", "Collarbone"),
            ("calf", "🦵", "Calves"),
        ),
    ),
)

# ─── Premium person-rank themes ──────────────────────────────────

PERSON_RANK_THEMES: tuple[Theme, ...] = (
    _person_rank("pr-type", "Who is most your type?", "💘"),
    _person_rank("pr-popular", "Who would be the most popular?", "🌟"),
    _person_rank("pr-kiss", "Who is the best kisser?", "💋"),
    _person_rank("pr-clingy", "Who would be the clingiest partner?", "🔒"),
    _person_rank("pr-charisma", "Who has the most charisma?", "✨"),
    _person_rank("pr-night", "Who is the night owl?", "🌙"),
    _person_rank("pr-erotic", "Who is secretly the naughtiest?", "🔥"),
    _person_rank("pr-ds", "Who is the biggest sadist?", "😈"),
    _person_rank("pr-cheat", "Who is most likely to cheat?", "💔"),
    _person_rank("pr-drunk", "Who is the most annoying drunk?", "🍺"),
    _person_rank("pr-selfish", "Who is the most selfish?", "👑"),
    _person_rank("pr-heartbreak", "Who takes longest to get over a breakup?", "😢"),
)

PERSON_RANK_GENRES: tuple[Genre, ...] = (
    Genre("love", "💕 Romance", ("pr-type", "pr-popular", "pr-kiss", "pr-clingy")),
    Genre("vibe", "🔥 Honest vibes", ("pr-charisma", "pr-night", "pr-erotic", "pr-ds")),
    Genre("roast", "😈 Roast", ("pr-cheat", "pr-drunk", "pr-selfish", "pr-heartbreak")),
)

THEMES: tuple[Theme, ...] = FREE_THEMES + FETISH_THEMES + PERSON_RANK_THEMES

_BY_ID: dict[str, Theme] = {t.id: t for t in THEMES}


def get_theme(theme_id: str) -> Theme | None:
    return _BY_ID.get(theme_id)


def get_theme_item(theme_id: str, item_id: str) -> ThemeItem | None:
    theme = get_theme(theme_id)
    if theme is None:
        return None
    return next((i for i in theme.items if i.id == item_id), None)


def themes_by_genre(genre_id: str) -> list[Theme]:
    """Person-rank themes in a genre, in display order. Unknown genre: empty list."""
    genre = next((g for g in PERSON_RANK_GENRES if g.id == genre_id), None)
    if genre is None:
        return []
    return [_BY_ID[tid] for tid in genre.theme_ids]
