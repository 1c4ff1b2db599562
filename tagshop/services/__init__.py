"""Services Layer — transaction engine, identity gate, notifier and public facade.

Invariants:
    - Services depend on core protocols, never on a concrete adapter
      (bootstrap.py is the single wiring point)
"""
