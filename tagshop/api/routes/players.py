"""Player Tag Routes — query, buy and sell a player's tag, plus bulk export.

Invariants:
    - Buy/sell responses carry the label the caller must apply
    - Player names: 1..MAX_IDENTITY_LENGTH chars at the route (400), blank or
      over-long after folding rejected by normalize_identity (400)
    - Transaction errors propagate as TagShopError to the global handler
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from tagshop.api.dependencies import get_tags_actions
from tagshop.core.domain_types import MAX_IDENTITY_LENGTH, normalize_identity
from tagshop.schemas.tags import (
    OwnershipExportResponse, PlayerTagResponse, PurchaseRequest,
    TransactionResponse,
)
from tagshop.services.tags_actions import TagsActions

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["players"])

PlayerName = Annotated[
    str, Path(min_length=1, max_length=MAX_IDENTITY_LENGTH),
]


@router.get("/players/{player_name}/tag", response_model=PlayerTagResponse)
async def get_player_tag(
    player_name: PlayerName, actions: TagsActions = Depends(get_tags_actions),
):
    tag_id = await actions.get_player_tag(player_name)
    return PlayerTagResponse(
        identity=normalize_identity(player_name),
        tag_id=tag_id,
        tag_name=actions.get_tag_name(tag_id) if tag_id is not None else None,
    )


@router.put("/players/{player_name}/tag", response_model=TransactionResponse)
async def buy_tag(
    player_name: PlayerName,
    body: PurchaseRequest,
    actions: TagsActions = Depends(get_tags_actions),
):
    outcome = await actions.set_player_tag(player_name, body.tag_id, body.label)
    return TransactionResponse(
        identity=outcome.identity,
        tag_id=outcome.tag_id,
        amount=outcome.price_paid,
        label=outcome.label_effect.label,
        ledger_settled=outcome.ledger_settled,
    )


@router.delete("/players/{player_name}/tag", response_model=TransactionResponse)
async def sell_tag(
    player_name: PlayerName, actions: TagsActions = Depends(get_tags_actions),
):
    outcome = await actions.unset_player_tag(player_name)
    return TransactionResponse(
        identity=outcome.identity,
        tag_id=outcome.tag_id,
        amount=outcome.refund,
        label=outcome.label_effect.label,
        ledger_settled=outcome.ledger_settled,
    )


@router.get("/ownership", response_model=OwnershipExportResponse)
async def export_ownership(actions: TagsActions = Depends(get_tags_actions)):
    return OwnershipExportResponse(
        data_location=actions.get_data_location(),
        ownership=await actions.get_all_data(),
    )
