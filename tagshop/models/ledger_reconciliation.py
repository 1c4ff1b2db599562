"""Ledger Reconciliation ORM — ledger adjustments that failed after an ownership commit.

Invariants:
    - Append-only from the engine; resolved_at is set by an operator after manual fix
    - operation is "add" (refund owed) or "subtract" (charge owed)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from tagshop.core.domain_types import MAX_IDENTITY_LENGTH
from tagshop.db.base import Base


class LedgerReconciliation(Base):
    __tablename__ = "ledger_reconciliations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identity: Mapped[str] = mapped_column(
        String(MAX_IDENTITY_LENGTH), nullable=False, index=True,
    )
    tag_id: Mapped[int] = mapped_column(Integer, nullable=False)
    operation: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    error: Mapped[str] = mapped_column(Text, nullable=False, default="")
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
