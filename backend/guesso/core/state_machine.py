"""Room State Machine: the single table of legal (action, state, role) transitions.

Invariants:
    - Every ActionKind has exactly one Transition entry (checked by tests)
    - A Transition lists every state it may leave from and every state it may land in;
      an empty `targets` means the action never changes Room.state
    - Checks are PURE: return an error descriptor on violation, None on success
    - Role is checked before state; either failure leaves the room untouched

Design Decisions:
    - Explicit table over per-handler string comparisons: exhaustiveness is a unit
      test, not a code review (ADR: explicit FSM)
    - Dynamic targets (select-asker, submit-ranking) are still enumerated here; the
      dispatcher refuses a handler result outside `targets`
    - Return dicts (not exceptions) so the same checks can be surfaced to clients as
      "what can I do now" hints without try/except
"""

from dataclasses import dataclass

from guesso.core.domain_types import ActionKind, Role, RoomState

S = RoomState


@dataclass(frozen=True)
class Transition:
    action: ActionKind
    role: Role
    sources: frozenset[RoomState]
    targets: frozenset[RoomState] = frozenset()


@dataclass(frozen=True)
class CallerContext:
    """Who is calling, relative to the room."""
    player_id: str
    is_host: bool
    asker_id: str | None


BACK_TO_THEME_SOURCES: frozenset[RoomState] = frozenset({
    S.SELECT_ASKER, S.SELECT_TARGETS, S.ASKER_RANKING, S.REVEAL_MIDDLE,
})

_ALL_STATES: frozenset[RoomState] = frozenset(RoomState)


def _t(
    action: ActionKind, role: Role,
    sources: set[RoomState] | frozenset[RoomState],
    targets: set[RoomState] | frozenset[RoomState] = frozenset(),
) -> Transition:
    return Transition(action, role, frozenset(sources), frozenset(targets))


# ADR: every legal transition in one place, adding an action requires editing this dict
TRANSITIONS: dict[ActionKind, Transition] = {
    ActionKind.START_GAME: _t(
        ActionKind.START_GAME, Role.HOST, {S.WAITING_PLAYERS}, {S.SELECT_THEME},
    ),
    ActionKind.SELECT_THEME: _t(
        ActionKind.SELECT_THEME, Role.HOST, {S.SELECT_THEME}, {S.SELECT_ASKER},
    ),
    ActionKind.SELECT_ASKER: _t(
        ActionKind.SELECT_ASKER, Role.HOST, {S.SELECT_ASKER},
        {S.SELECT_TARGETS, S.ASKER_RANKING},
    ),
    ActionKind.SELECT_TARGETS: _t(
        ActionKind.SELECT_TARGETS, Role.ASKER, {S.SELECT_TARGETS}, {S.ASKER_RANKING},
    ),
    ActionKind.SUBMIT_RANKING: _t(
        ActionKind.SUBMIT_RANKING, Role.ASKER, {S.ASKER_RANKING},
        {S.REVEAL_MIDDLE, S.GUESSING_OPEN},
    ),
    ActionKind.OPEN_GUESSING: _t(
        ActionKind.OPEN_GUESSING, Role.HOST, {S.REVEAL_MIDDLE}, {S.GUESSING_OPEN},
    ),
    ActionKind.SUBMIT_GUESS: _t(
        ActionKind.SUBMIT_GUESS, Role.GUESSER, {S.GUESSING_OPEN},
    ),
    ActionKind.CLOSE_GUESS: _t(
        ActionKind.CLOSE_GUESS, Role.HOST, {S.GUESSING_OPEN}, {S.GUESSING_CLOSED},
    ),
    ActionKind.REVEAL_RESULT: _t(
        ActionKind.REVEAL_RESULT, Role.HOST, {S.GUESSING_CLOSED}, {S.RESULT_REVEALED},
    ),
    ActionKind.NEXT_RANK: _t(
        ActionKind.NEXT_RANK, Role.HOST, {S.RESULT_REVEALED}, {S.GUESSING_OPEN},
    ),
    ActionKind.SHOW_SUMMARY: _t(
        ActionKind.SHOW_SUMMARY, Role.HOST, {S.RESULT_REVEALED}, {S.ROUND_SUMMARY},
    ),
    ActionKind.NEXT_ROUND: _t(
        ActionKind.NEXT_ROUND, Role.HOST, {S.ROUND_SUMMARY}, {S.SELECT_THEME},
    ),
    ActionKind.BACK_TO_THEME: _t(
        ActionKind.BACK_TO_THEME, Role.HOST, BACK_TO_THEME_SOURCES, {S.SELECT_THEME},
    ),
    ActionKind.KICK_PLAYER: _t(
        ActionKind.KICK_PLAYER, Role.HOST, _ALL_STATES,
    ),
}


# --- Checks -------------------------------------------------------------------

def check_role(transition: Transition, caller: CallerContext) -> dict | None:
    if transition.role == Role.HOST and not caller.is_host:
        return _error("ROLE_VIOLATION", "Only the host can do this.")
    if transition.role == Role.ASKER and caller.player_id != caller.asker_id:
        return _error("ROLE_VIOLATION", "Only the asker can do this.")
    if transition.role == Role.GUESSER and caller.player_id == caller.asker_id:
        return _error("ROLE_VIOLATION", "The asker cannot submit a guess.")
    return None


def check_state(transition: Transition, state: RoomState) -> dict | None:
    if state not in transition.sources:
        return _error(
            "INVALID_STATE",
            f"Cannot {transition.action.value} while the room is in {state.value}.",
        )
    return None


def validate_transition(
    action: ActionKind, state: RoomState, caller: CallerContext,
) -> dict | None:
    """Role check, then state check. None means the action may proceed."""
    transition = TRANSITIONS[action]
    return check_role(transition, caller) or check_state(transition, state)


def check_target(action: ActionKind, target: RoomState | None) -> dict | None:
    """A handler may only land in a state the table declares for its action."""
    transition = TRANSITIONS[action]
    if target is None and not transition.targets:
        return None
    if target not in transition.targets:
        return _error(
            "INVALID_STATE",
            f"{action.value} cannot move the room to {target}.",
        )
    return None


def legal_actions(state: RoomState, caller: CallerContext) -> list[ActionKind]:
    """Actions this caller may attempt right now (payload checks aside)."""
    return [
        action for action in TRANSITIONS
        if validate_transition(action, state, caller) is None
    ]


# --- Helper -------------------------------------------------------------------

def _error(code: str, message: str) -> dict:
    return {"status": "error", "error_code": code, "message": message}
