"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Identity is always case-folded, non-blank and at most MAX_IDENTITY_LENGTH long
    - TagId is a non-negative catalog index; "no tag" is None, never -1
    - TagDefinition, TransactionEvent and outcomes are frozen (immutable)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - LabelEffect returned to the caller: the engine never owns the display label
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import NewType

from tagshop.core.errors import ErrorContext, InvalidIdentityError


# ─── Identity Types ──────────────────────────────────────────────

Identity = NewType("Identity", str)
TagId = NewType("TagId", int)


MAX_IDENTITY_LENGTH = 64


def normalize_identity(player_name: str) -> Identity:
    """Case-fold a player name into the key used by store and ledger.

    Raises InvalidIdentityError for names that fold to an empty key or to
    more than MAX_IDENTITY_LENGTH characters.
    """
    identity = player_name.strip().casefold()
    if not identity:
        raise InvalidIdentityError("name is blank")
    if len(identity) > MAX_IDENTITY_LENGTH:
        raise InvalidIdentityError(
            f"name exceeds {MAX_IDENTITY_LENGTH} characters",
            ErrorContext(identity=identity[:MAX_IDENTITY_LENGTH]),
        )
    return Identity(identity)


# ─── Enums ───────────────────────────────────────────────────────

class TransactionKind(str, Enum):
    """Buy/sell — the only two transactions the engine performs."""
    BUY = "buy"
    SELL = "sell"


class LedgerOperation(str, Enum):
    """Ledger mutations, recorded when a post-commit adjustment fails."""
    ADD = "add"
    SUBTRACT = "subtract"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class TagDefinition:
    """One catalog entry. id is its position in catalog order."""
    id: TagId
    display_text: str
    price: int


@dataclass(frozen=True)
class TransactionEvent:
    """Ephemeral buy/sell notification, consumed once by the notifier."""
    kind: TransactionKind
    identity: Identity
    tag_id: TagId
    amount: int = 0
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


@dataclass(frozen=True)
class LabelEffect:
    """Post-commit display label the caller must apply to the player."""
    player_name: str
    label: str


@dataclass(frozen=True)
class BuyOutcome:
    identity: Identity
    tag_id: TagId
    price_paid: int
    label_effect: LabelEffect
    ledger_settled: bool = True


@dataclass(frozen=True)
class SaleOutcome:
    identity: Identity
    tag_id: TagId
    refund: int
    label_effect: LabelEffect
    ledger_settled: bool = True


@dataclass(frozen=True)
class LedgerDiscrepancy:
    """Ledger adjustment that failed after ownership was already committed."""
    identity: Identity
    tag_id: TagId
    operation: LedgerOperation
    amount: int
    error: str
    recorded_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
