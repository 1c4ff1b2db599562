"""Infrastructure Layer — concrete adapters and cross-cutting concerns.

Invariants:
    - Adapters implement core/repository_protocols.py structurally
    - All external failures mapped to AdapterFailureError subclasses
"""
