"""Infrastructure Layer: database sessions, logging setup, request throttling.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Storage failures are mapped to core DatabaseError before they leave this layer
"""
