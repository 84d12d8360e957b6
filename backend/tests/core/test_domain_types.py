"""Domain Types: verifies enum values and game limits.

Tests:
    - NewType wrappers are callable and transparent
    - Enums have expected members and serialize to string
    - RoomState has exactly 10 members (the state graph is the invariant)
"""

from guesso.core.domain_types import (
    HINT_VISIBLE_STATES, MAX_TARGETS, MIN_TARGETS, MIN_TARGETS_FOR_HINT,
    ActionKind, PlayerId, Role, RoomCode, RoomState, ThemeCategory,
)


def test_identity_types_are_plain_strings():
    assert RoomCode("ABCDEF") == "ABCDEF"
    assert PlayerId("p-1") == "p-1"


def test_room_state_has_exactly_ten_members():
    assert len(RoomState) == 10
    assert RoomState.WAITING_PLAYERS.value == "WAITING_PLAYERS"


def test_action_kind_values_are_kebab_case():
    assert len(ActionKind) == 14
    assert ActionKind("submit-guess") is ActionKind.SUBMIT_GUESS
    assert all(a.value == a.value.lower() and "_" not in a.value for a in ActionKind)


def test_enums_are_str_subclasses():
    assert isinstance(RoomState.SELECT_THEME, str)
    assert isinstance(Role.HOST, str)
    assert ThemeCategory.PERSON_RANK.value == "person-rank"


def test_target_limits():
    assert MIN_TARGETS <= MIN_TARGETS_FOR_HINT <= MAX_TARGETS


def test_hint_hidden_before_ranking():
    assert RoomState.ASKER_RANKING not in HINT_VISIBLE_STATES
    assert RoomState.REVEAL_MIDDLE in HINT_VISIBLE_STATES
