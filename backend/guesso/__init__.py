"""Guesso: room engine for a party game where players guess each other's private rankings.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Only the version string lives here: explicit imports everywhere else
      (ADR: no convention-over-config)
"""

__version__ = "1.0.0"
