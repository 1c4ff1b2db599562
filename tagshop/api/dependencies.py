"""Route Dependencies — access to the TagsActions built during lifespan."""

from fastapi import Request

from tagshop.services.tags_actions import TagsActions


def get_tags_actions(request: Request) -> TagsActions:
    actions = getattr(request.app.state, "tags_actions", None)
    if actions is None:
        raise RuntimeError("Tag shop not initialized")
    return actions
