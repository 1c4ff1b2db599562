"""Tag Catalog Routes — read-only view of the configured catalog."""

from fastapi import APIRouter, Depends

from tagshop.api.dependencies import get_tags_actions
from tagshop.core.catalog import strip_formatting
from tagshop.core.domain_types import TagDefinition
from tagshop.core.errors import ErrorContext, TagNotFoundError
from tagshop.schemas.tags import TagListResponse, TagResponse
from tagshop.services.tags_actions import TagsActions

router = APIRouter(prefix="/api/v1/tags", tags=["tags"])


def _to_response(tag: TagDefinition, actions: TagsActions) -> TagResponse:
    return TagResponse(
        id=tag.id,
        display_text=tag.display_text,
        plain_text=strip_formatting(tag.display_text),
        price=actions.get_tag_price(tag.id),
    )


@router.get("", response_model=TagListResponse)
async def list_tags(actions: TagsActions = Depends(get_tags_actions)):
    return TagListResponse(
        api_version=actions.API_VERSION,
        display_name_format=actions.get_display_name_format(),
        tags=[_to_response(t, actions) for t in actions.get_all_tags()],
    )


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(tag_id: int, actions: TagsActions = Depends(get_tags_actions)):
    tag = actions.catalog.get_tag(tag_id)
    if tag is None:
        raise TagNotFoundError(tag_id, ErrorContext(tag_id=tag_id))
    return _to_response(tag, actions)
