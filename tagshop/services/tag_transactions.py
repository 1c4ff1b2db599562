"""Tag Transactions — buy/sell state machines over the ownership store and ledger.

Invariants:
    - Every transaction runs under the identity gate: one in flight per identity
    - Ownership is always read first; validation failures perform zero mutation
    - Ownership write happens before any ledger mutation; a failed write aborts
      the rest of the transaction
    - A ledger failure after the ownership write is NOT rolled back: it is
      recorded as a LedgerDiscrepancy and the outcome reports ledger_settled=False
    - Events are emitted only after the ownership write and the ledger step ran
    - Disabled ledger: no ledger calls, price and refund are 0, no error path

Design Decisions:
    - Engine raises typed TagShopError subclasses; callers map them to messages
    - Label is returned as LabelEffect, the engine never touches player state
"""

import logging

from tagshop.core.domain_types import (
    BuyOutcome, Identity, LabelEffect, LedgerDiscrepancy, LedgerOperation,
    SaleOutcome, TagId, TransactionEvent, TransactionKind, normalize_identity,
)
from tagshop.core.display_name import compose_label
from tagshop.core.errors import (
    ErrorContext, InsufficientFundsError, LedgerError, NoTagOwnedError,
    TagAlreadyOwnedError, TagNotFoundError,
)
from tagshop.core.repository_protocols import (
    EventNotifier, LedgerService, OwnershipStore, ReconciliationLog,
)
from tagshop.core.shop_context import ShopContext
from tagshop.services.identity_gate import IdentityGate

logger = logging.getLogger(__name__)


class TransactionEngine:
    """Orchestrates tag purchases and sales for one shop context."""

    def __init__(
        self,
        context: ShopContext,
        store: OwnershipStore,
        notifier: EventNotifier,
        ledger: LedgerService | None = None,
        reconciliation: ReconciliationLog | None = None,
        gate: IdentityGate | None = None,
    ):
        if context.ledger_enabled and ledger is None:
            raise ValueError("ledger_enabled requires a LedgerService")
        self.context = context
        self.store = store
        self.notifier = notifier
        self.ledger = ledger if context.ledger_enabled else None
        self.reconciliation = reconciliation
        self.gate = gate or IdentityGate()

    async def current_tag(self, player_name: str) -> TagId | None:
        return await self.store.get_tag(normalize_identity(player_name))

    async def buy(
        self, player_name: str, tag_id: int, base_label: str | None = None,
    ) -> BuyOutcome:
        identity = normalize_identity(player_name)
        ctx = ErrorContext(identity=identity, tag_id=tag_id, operation="buy")
        tag = self.context.catalog.get_tag(tag_id)
        if tag is None:
            raise TagNotFoundError(tag_id, ctx)

        async with self.gate.hold(identity):
            current = await self.store.get_tag(identity)
            if current == tag.id:
                raise TagAlreadyOwnedError(tag.id, ctx)

            price = self.context.price_for(tag.id)
            if self.ledger is not None:
                balance = await self.ledger.get_balance(identity)
                if balance < price:
                    raise InsufficientFundsError(price - balance, ctx)

            await self.store.set_tag(identity, tag.id)
            settled = await self._adjust_ledger(
                identity, tag.id, LedgerOperation.SUBTRACT, price,
            )

        self.notifier.notify(TransactionEvent(
            TransactionKind.BUY, identity, tag.id, price,
        ))
        label = compose_label(
            self.context.display_name_format,
            base_label if base_label is not None else player_name,
            tag.display_text,
        )
        logger.info(
            f"Tag {tag.id} bought for {price}",
            extra={"identity": identity, "tag_id": tag.id, "amount": price},
        )
        return BuyOutcome(
            identity=identity,
            tag_id=tag.id,
            price_paid=price,
            label_effect=LabelEffect(player_name, label),
            ledger_settled=settled,
        )

    async def sell(self, player_name: str) -> SaleOutcome:
        identity = normalize_identity(player_name)
        ctx = ErrorContext(identity=identity, operation="sell")

        async with self.gate.hold(identity):
            current = await self.store.get_tag(identity)
            if current is None:
                raise NoTagOwnedError(ctx)

            refund = self.context.price_for(current)
            await self.store.clear_tag(identity)
            settled = await self._adjust_ledger(
                identity, current, LedgerOperation.ADD, refund,
            )

        self.notifier.notify(TransactionEvent(
            TransactionKind.SELL, identity, current, refund,
        ))
        logger.info(
            f"Tag {current} sold for {refund}",
            extra={"identity": identity, "tag_id": current, "amount": refund},
        )
        return SaleOutcome(
            identity=identity,
            tag_id=current,
            refund=refund,
            label_effect=LabelEffect(player_name, player_name),
            ledger_settled=settled,
        )

    async def _adjust_ledger(
        self,
        identity: Identity,
        tag_id: TagId,
        operation: LedgerOperation,
        amount: int,
    ) -> bool:
        """Best-effort post-commit ledger mutation. Returns False on failure."""
        if self.ledger is None or amount <= 0:
            return True
        try:
            if operation is LedgerOperation.SUBTRACT:
                await self.ledger.subtract(identity, amount)
            else:
                await self.ledger.add(identity, amount)
        except LedgerError as e:
            logger.error(
                f"Ledger {operation.value} failed after ownership commit: {e}",
                extra={
                    "identity": identity, "tag_id": tag_id,
                    "amount": amount, "error_code": e.code,
                },
            )
            if self.reconciliation is not None:
                await self.reconciliation.record(LedgerDiscrepancy(
                    identity=identity, tag_id=tag_id, operation=operation,
                    amount=amount, error=e.message,
                ))
            return False
        return True
