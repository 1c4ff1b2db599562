"""TagShop API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TagShopError → structured JSON responses
    - Database and TagsActions initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - TagsActions stored on app.state, resolved per request by get_tags_actions
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tagshop.api.error_handlers import register_error_handlers
from tagshop.api.routes import health, players, tags
from tagshop.config import get_settings
from tagshop.infrastructure.database import init_db
from tagshop.infrastructure.observability import setup_logging
from tagshop.services.bootstrap import build_tags_actions
from tagshop.services.tags_actions import TagsActions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.tags_actions = build_tags_actions(settings, manager)
    logger.info("TagShop API started")
    yield
    logger.info("TagShop API shutting down")
    await app.state.tags_actions.aclose()
    await manager.close()


app = FastAPI(
    title="TagShop API", version=TagsActions.API_VERSION, lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(tags.router)
app.include_router(players.router)

register_error_handlers(app)
