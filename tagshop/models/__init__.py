"""ORM Models — SQLAlchemy declarative models for persisted shop state.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from tagshop.models.tag_ownership import TagOwnership  # noqa: F401
from tagshop.models.ledger_reconciliation import LedgerReconciliation  # noqa: F401
