"""Boundary Protocols — contracts between the transaction engine and its collaborators.

Invariants:
    - Engine NEVER imports a concrete store, ledger or notifier
    - Every async call resolves exactly once (returns or raises AdapterFailureError)
    - Absence of an ownership record is None, not a sentinel integer

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - notify() is sync: delivery is fire-and-forget, the notifier schedules
      any async work itself
"""

from typing import Protocol

from tagshop.core.domain_types import (
    Identity, TagId, TransactionEvent, LedgerDiscrepancy,
)


class OwnershipStore(Protocol):
    """Contract for identity → tag persistence — implemented by infrastructure."""
    async def get_tag(self, identity: Identity) -> TagId | None: ...
    async def set_tag(self, identity: Identity, tag_id: TagId) -> None: ...
    async def clear_tag(self, identity: Identity) -> None: ...
    async def get_all(self) -> dict[str, int]: ...


class LedgerService(Protocol):
    """Contract for the external balance ledger. No compare-and-swap."""
    async def get_balance(self, identity: Identity) -> int: ...
    async def add(self, identity: Identity, amount: int) -> None: ...
    async def subtract(self, identity: Identity, amount: int) -> None: ...


class EventNotifier(Protocol):
    """Contract for buy/sell event delivery — fire-and-forget."""
    def notify(self, event: TransactionEvent) -> None: ...


class ReconciliationLog(Protocol):
    """Contract for recording ledger adjustments that failed after commit."""
    async def record(self, discrepancy: LedgerDiscrepancy) -> None: ...
