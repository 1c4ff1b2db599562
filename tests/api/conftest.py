"""API test fixtures — FastAPI test client with TagsActions over in-memory fakes.

Invariants:
    - get_tags_actions dependency overridden; lifespan (DB, ledger) never runs
    - Catalog ["&6VIP:100", "Legend:500"], ledger enabled, alice balance 150
"""

import pytest
from httpx import ASGITransport, AsyncClient

from tagshop.api.dependencies import get_tags_actions
from tagshop.core.shop_context import ShopContext
from tagshop.main import app
from tagshop.services.tag_transactions import TransactionEngine
from tagshop.services.tags_actions import TagsActions

from tests.services.fake_adapters import (
    FakeLedger, FakeOwnershipStore, RecordingNotifier,
)


@pytest.fixture
def fake_store():
    return FakeOwnershipStore()


@pytest.fixture
def fake_ledger():
    return FakeLedger({"alice": 150})


@pytest.fixture
def tags_actions(fake_store, fake_ledger):
    context = ShopContext.create(["&6VIP:100", "Legend:500"], ledger_enabled=True)
    engine = TransactionEngine(
        context, fake_store, RecordingNotifier(), ledger=fake_ledger,
    )
    return TagsActions(engine, data_location="sqlite+aiosqlite:///test.db")


@pytest.fixture
async def client(tags_actions):
    app.dependency_overrides[get_tags_actions] = lambda: tags_actions
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
