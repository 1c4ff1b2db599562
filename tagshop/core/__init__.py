"""Core Layer — domain types, errors, catalog and boundary protocols.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Pure and deterministic: no IO
"""
