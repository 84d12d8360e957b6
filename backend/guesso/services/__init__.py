"""Services Layer: action handlers, dispatch, snapshots and room lifecycle.

Invariants:
    - Handlers split by round phase (max 4 methods each)
    - Action dispatch uses an explicit dict mapping (no auto-discovery)
    - Only room_store issues UPDATEs against the rooms table

Design Decisions:
    - One handler file per phase for locality (ADR: no god objects)
"""
