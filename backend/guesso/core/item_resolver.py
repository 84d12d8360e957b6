"""Item Resolver: polymorphic identity for rankable things (catalog item vs. player).

Invariants:
    - Ranking, guessing, reveal and scoring logic never know which variant they hold
    - eligible_ids is ordered and duplicate-free; it defines what a valid ranking permutes
    - label_for never raises: unknown ids (e.g. a kicked player) get UNKNOWN_LABEL

Design Decisions:
    - Protocol + two frozen dataclasses over an if/else on is_person_rank scattered
      across handlers (ADR: one seam, two implementations)
    - resolver_for_round is the only place that picks a variant
"""

from dataclasses import dataclass, field
from typing import Protocol

from guesso.core.theme_catalog import Theme, get_theme_item

UNKNOWN_LABEL = "(left the room)"


class ItemResolver(Protocol):
    """Resolves ranked ids to display labels."""

    @property
    def eligible_ids(self) -> list[str]: ...

    def label_for(self, item_id: str) -> str: ...


@dataclass(frozen=True)
class CatalogItemResolver:
    """Ordinary theme: ids are ThemeItem ids."""
    theme: Theme

    @property
    def eligible_ids(self) -> list[str]:
        return self.theme.item_ids()

    def label_for(self, item_id: str) -> str:
        item = get_theme_item(self.theme.id, item_id)
        if item is None:
            return UNKNOWN_LABEL
        return f"{item.emoji} {item.label}"


@dataclass(frozen=True)
class RosterItemResolver:
    """Person-rank theme: ids are player ids, restricted to the chosen targets."""
    target_ids: tuple[str, ...]
    names: dict[str, str] = field(default_factory=dict)

    @property
    def eligible_ids(self) -> list[str]:
        return list(self.target_ids)

    def label_for(self, item_id: str) -> str:
        return self.names.get(item_id, UNKNOWN_LABEL)


def resolver_for_round(
    theme: Theme,
    target_ids: list[str] | None,
    roster_names: dict[str, str],
) -> ItemResolver:
    """Pick the resolver variant for a round."""
    if theme.is_person_rank:
        return RosterItemResolver(
            target_ids=tuple(target_ids or ()), names=dict(roster_names),
        )
    return CatalogItemResolver(theme=theme)


def label_map(resolver: ItemResolver) -> dict[str, str]:
    return {item_id: resolver.label_for(item_id) for item_id in resolver.eligible_ids}
