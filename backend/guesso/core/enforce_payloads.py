"""Payload Enforcement: per-action input rules that do not depend on room state.

Invariants:
    - All functions are PURE: no IO, no DB
    - Return error dict on violation, None on success
    - Invalid input is always rejected, never coerced (no dedup, no truncation)

Design Decisions:
    - Separated from state_machine: state/role gates are about *when*, these are
      about *what* (ADR: responsibility separation, same split as gates vs. round checks)
"""

from collections import Counter

from guesso.core.domain_types import MAX_TARGETS, MIN_TARGETS
from guesso.core.theme_catalog import Theme


def check_theme_selectable(
    theme: Theme | None, verified: bool, entitled: bool,
) -> dict | None:
    """Theme must exist and its gate (verification / premium) must be open."""
    if theme is None:
        return _error("VALIDATION_ERROR", "Unknown theme id.")
    if theme.requires_verification and not verified:
        return _error(
            "ROLE_VIOLATION",
            "This theme is locked until the room is verified.",
        )
    if theme.requires_entitlement and not entitled:
        return _error(
            "ROLE_VIOLATION",
            "This theme requires the premium pack.",
        )
    return None


def check_targets(target_ids: list[str], member_ids: set[str]) -> dict | None:
    """Person-rank targets: 3-7 distinct members of the room."""
    if len(target_ids) < MIN_TARGETS:
        return _error(
            "VALIDATION_ERROR", f"Select at least {MIN_TARGETS} players.",
        )
    if len(target_ids) > MAX_TARGETS:
        return _error(
            "VALIDATION_ERROR", f"Select at most {MAX_TARGETS} players.",
        )
    if len(set(target_ids)) != len(target_ids):
        return _error("VALIDATION_ERROR", "Each player can be selected only once.")
    if any(pid not in member_ids for pid in target_ids):
        return _error("VALIDATION_ERROR", "Some selected players are not in this room.")
    return None


def check_ranking(ranking: list[str], eligible_ids: list[str]) -> dict | None:
    """Ranking must be a permutation of exactly the eligible ids."""
    n = len(eligible_ids)
    if n == 0:
        return _error("VALIDATION_ERROR", "This round has nothing to rank yet.")
    if len(ranking) != n:
        return _error(
            "VALIDATION_ERROR", f"Rank exactly {n} entries (got {len(ranking)}).",
        )
    duplicates = [i for i, c in Counter(ranking).items() if c > 1]
    if duplicates:
        return _error(
            "VALIDATION_ERROR", f"Duplicate entries in ranking: {', '.join(duplicates)}.",
        )
    unknown = [i for i in ranking if i not in set(eligible_ids)]
    if unknown:
        return _error(
            "VALIDATION_ERROR", f"Unknown entries in ranking: {', '.join(unknown)}.",
        )
    return None


def check_guess(guess_top1: str | None, eligible_ids: list[str]) -> dict | None:
    if not guess_top1:
        return _error("VALIDATION_ERROR", "guess_top1 is required.")
    if guess_top1 not in eligible_ids:
        return _error("VALIDATION_ERROR", f"'{guess_top1}' cannot be guessed in this round.")
    return None


def require(value: object, field_name: str) -> dict | None:
    """Presence check for action-specific fields."""
    if value is None or value == "" or value == []:
        return _error("VALIDATION_ERROR", f"{field_name} is required.")
    return None


def _error(code: str, message: str) -> dict:
    return {"status": "error", "error_code": code, "message": message}
