"""Infrastructure fixtures — fresh in-memory SQLite database per test.

Design Decisions:
    - SQLite in-memory via aiosqlite: fast, no external dependency; the
      aiosqlite dialect keeps a single connection for :memory: URLs
"""

import pytest

from tagshop.db.base import Base
from tagshop.infrastructure.database import DatabaseSessionManager
import tagshop.models  # noqa: F401


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.close()


@pytest.fixture
async def drop_tables(db_manager):
    """Call to make every subsequent statement fail with an operational error."""
    async def _drop():
        async with db_manager.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    return _drop
