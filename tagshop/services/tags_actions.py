"""Tags Actions — the versioned public surface consumed by callers.

Invariants:
    - API_VERSION is bumped on any breaking change to the methods below
    - get_tag_price returns None when the ledger is disabled or the tag is missing
    - get_all_data returns {} or the store's row mapping, unmodified

Design Decisions:
    - Thin facade over TransactionEngine + TagCatalog: no business rules here
    - 2.0: async returns replace callbacks, None replaces the -1 sentinel,
      buy/sell return outcomes carrying the label effect
"""

import logging
from collections.abc import Awaitable, Callable

from tagshop.core.catalog import TagCatalog
from tagshop.core.domain_types import BuyOutcome, SaleOutcome, TagDefinition, TagId
from tagshop.services.tag_transactions import TransactionEngine

logger = logging.getLogger(__name__)


class TagsActions:
    """Public tag-shop API."""

    API_VERSION = "2.0"

    def __init__(
        self,
        engine: TransactionEngine,
        data_location: str = "",
        on_close: Callable[[], Awaitable[None]] | None = None,
    ):
        self.engine = engine
        self._data_location = data_location
        self._on_close = on_close

    @property
    def catalog(self) -> TagCatalog:
        return self.engine.context.catalog

    @property
    def ledger_enabled(self) -> bool:
        return self.engine.context.ledger_enabled

    def get_all_tags(self) -> tuple[TagDefinition, ...]:
        return self.catalog.get_all_tags()

    def get_tag_price(self, tag_id: int) -> int | None:
        if not self.ledger_enabled:
            return None
        return self.catalog.get_tag_price(tag_id)

    def get_tag_name(self, tag_id: int) -> str | None:
        return self.catalog.get_tag_name(tag_id)

    def tag_exists(self, tag_id: int) -> bool:
        return self.catalog.tag_exists(tag_id)

    async def get_player_tag(self, player_name: str) -> TagId | None:
        return await self.engine.current_tag(player_name)

    async def set_player_tag(
        self, player_name: str, tag_id: int, base_label: str | None = None,
    ) -> BuyOutcome:
        return await self.engine.buy(player_name, tag_id, base_label)

    async def unset_player_tag(self, player_name: str) -> SaleOutcome:
        return await self.engine.sell(player_name)

    def get_display_name_format(self) -> str:
        return self.engine.context.display_name_format

    async def get_all_data(self) -> dict[str, int]:
        rows = await self.engine.store.get_all()
        return rows if rows else {}

    def get_data_location(self) -> str:
        """Where ownership data lives. A hint only, no format guarantee."""
        return self._data_location

    async def aclose(self) -> None:
        if self._on_close is not None:
            await self._on_close()
        drain = getattr(self.engine.notifier, "drain", None)
        if drain is not None:
            await drain()
        logger.info("Tag shop closed")
