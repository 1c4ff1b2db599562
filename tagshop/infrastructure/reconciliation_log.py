"""SQL Reconciliation Log — persists ledger discrepancies for manual reconciliation.

Invariants:
    - record() never raises: the purchase/sale it belongs to is already committed
    - A discrepancy that cannot be persisted is logged at CRITICAL with all fields
"""

import logging

from sqlalchemy import select

from tagshop.core.domain_types import LedgerDiscrepancy
from tagshop.core.errors import DatabaseError
from tagshop.infrastructure.database import DatabaseSessionManager
from tagshop.models.ledger_reconciliation import LedgerReconciliation

logger = logging.getLogger(__name__)


class SqlReconciliationLog:

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def record(self, discrepancy: LedgerDiscrepancy) -> None:
        try:
            async with self._manager.session("record_discrepancy") as db:
                db.add(LedgerReconciliation(
                    identity=discrepancy.identity,
                    tag_id=discrepancy.tag_id,
                    operation=discrepancy.operation.value,
                    amount=discrepancy.amount,
                    error=discrepancy.error,
                    recorded_at=discrepancy.recorded_at,
                ))
                await db.commit()
        except DatabaseError as e:
            logger.critical(
                f"Unrecorded ledger discrepancy ({discrepancy.operation.value} "
                f"{discrepancy.amount}): {e}",
                extra={
                    "identity": discrepancy.identity,
                    "tag_id": discrepancy.tag_id,
                    "amount": discrepancy.amount,
                    "error_code": e.code,
                },
            )

    async def pending(self) -> list[LedgerReconciliation]:
        """Unresolved discrepancies, oldest first."""
        async with self._manager.session("list_discrepancies") as db:
            result = await db.execute(
                select(LedgerReconciliation)
                .where(LedgerReconciliation.resolved_at.is_(None))
                .order_by(LedgerReconciliation.recorded_at, LedgerReconciliation.id)
            )
            return list(result.scalars().all())
