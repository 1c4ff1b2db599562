"""Tag Catalog — ordered, immutable list of tag definitions parsed from config entries.

Invariants:
    - Entry format is "displayText:price", split at the FIRST colon
    - Display text: '&' escapes become '§' markers, and a '§r' reset is appended
    - Tag id == position in the configured list (0-based, order preserved)
    - Out-of-range or negative ids are "not found" (None / False), never an error

Design Decisions:
    - Catalog parsed once into a tuple of frozen dataclasses: lookups are index
      reads, and a reloaded catalog is a new TagCatalog object
    - Price kept even when the ledger is disabled: the facade decides whether to
      expose it
"""

import re
from collections.abc import Iterable

from tagshop.core.domain_types import TagDefinition, TagId
from tagshop.core.errors import CatalogFormatError

FORMAT_MARKER = "§"
ESCAPE_CHAR = "&"
RESET_MARKER = FORMAT_MARKER + "r"

_FORMAT_CODE = re.compile(FORMAT_MARKER + "[0-9a-zA-Z]")


def parse_tag_entry(index: int, raw: str) -> TagDefinition:
    """Parse one "displayText:price" entry into a TagDefinition."""
    display, sep, price_text = raw.partition(":")
    if not sep:
        raise CatalogFormatError(raw, "missing ':' separator")
    try:
        price = int(price_text.strip())
    except ValueError:
        raise CatalogFormatError(raw, "price is not an integer")
    if price < 0:
        raise CatalogFormatError(raw, "price is negative")
    text = display.replace(ESCAPE_CHAR, FORMAT_MARKER) + RESET_MARKER
    return TagDefinition(id=TagId(index), display_text=text, price=price)


def strip_formatting(text: str) -> str:
    """Remove '§x' formatting markers, leaving plain text."""
    return _FORMAT_CODE.sub("", text)


class TagCatalog:
    """Read-only catalog snapshot."""

    def __init__(self, tags: Iterable[TagDefinition] = ()):
        self._tags: tuple[TagDefinition, ...] = tuple(tags)

    @classmethod
    def from_entries(cls, entries: Iterable[str] | None) -> "TagCatalog":
        return cls(
            parse_tag_entry(i, raw) for i, raw in enumerate(entries or ())
        )

    def __len__(self) -> int:
        return len(self._tags)

    def get_all_tags(self) -> tuple[TagDefinition, ...]:
        return self._tags

    def get_tag(self, tag_id: int) -> TagDefinition | None:
        if 0 <= tag_id < len(self._tags):
            return self._tags[tag_id]
        return None

    def tag_exists(self, tag_id: int) -> bool:
        return self.get_tag(tag_id) is not None

    def get_tag_price(self, tag_id: int) -> int | None:
        tag = self.get_tag(tag_id)
        return tag.price if tag else None

    def get_tag_name(self, tag_id: int) -> str | None:
        tag = self.get_tag(tag_id)
        return tag.display_text if tag else None
