"""Tag Shop Schemas — Pydantic models for API request/response boundaries.

Invariants:
    - PurchaseRequest.tag_id is non-negative; range against the catalog is checked by the engine
    - label is stripped; blank label means "use the player name"
    - price is None when the ledger is disabled
"""

from pydantic import BaseModel, Field, field_validator


class TagResponse(BaseModel):
    id: int
    display_text: str
    plain_text: str
    price: int | None = None


class TagListResponse(BaseModel):
    api_version: str
    display_name_format: str
    tags: list[TagResponse]


class PlayerTagResponse(BaseModel):
    identity: str
    tag_id: int | None = None
    tag_name: str | None = None


class PurchaseRequest(BaseModel):
    """Buy request — label is the player's current base label."""
    tag_id: int = Field(ge=0)
    label: str | None = Field(None, max_length=128)

    @field_validator("label")
    @classmethod
    def strip_label(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class TransactionResponse(BaseModel):
    """Buy/sell result. label must be applied by the caller."""
    identity: str
    tag_id: int
    amount: int
    label: str
    ledger_settled: bool


class OwnershipExportResponse(BaseModel):
    data_location: str
    ownership: dict[str, int]
