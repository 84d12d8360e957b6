"""Core Layer: pure game rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (randomness is injected)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
    - Checks return error descriptors; services/ turns them into exceptions
"""
