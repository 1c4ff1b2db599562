"""TagShop — cosmetic tag purchases backed by an ownership store and a balance ledger.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
