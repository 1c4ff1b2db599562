"""Shop Context — immutable configuration snapshot injected into the engine.

Invariants:
    - Built once at startup; the engine never reads settings or globals
    - display_name_format is already resolved (never blank)
"""

from dataclasses import dataclass

from tagshop.core.catalog import TagCatalog
from tagshop.core.display_name import resolve_display_name_format


@dataclass(frozen=True)
class ShopContext:
    catalog: TagCatalog
    display_name_format: str
    ledger_enabled: bool = False

    @classmethod
    def create(
        cls,
        tag_entries: list[str] | None,
        display_name_format: str | None = None,
        ledger_enabled: bool = False,
    ) -> "ShopContext":
        return cls(
            catalog=TagCatalog.from_entries(tag_entries),
            display_name_format=resolve_display_name_format(display_name_format),
            ledger_enabled=ledger_enabled,
        )

    def price_for(self, tag_id: int) -> int:
        """Price charged or refunded right now. 0 with the ledger disabled or a stale id."""
        if not self.ledger_enabled:
            return 0
        return self.catalog.get_tag_price(tag_id) or 0
