"""Service test fixtures — transaction engine wired to in-memory fakes.

Invariants:
    - Catalog is ["VIP:100", "Legend:500"] unless a test builds its own context
    - `engine` has the ledger enabled; `free_engine` runs with it disabled
    - alice starts with balance 150 and no tag
"""

import pytest

from tagshop.core.shop_context import ShopContext
from tagshop.services.tag_transactions import TransactionEngine
from tagshop.services.tags_actions import TagsActions

from tests.services.fake_adapters import (
    FakeLedger, FakeOwnershipStore, RecordingNotifier, RecordingReconciliation,
)

CATALOG = ["VIP:100", "Legend:500"]


@pytest.fixture
def store():
    return FakeOwnershipStore()


@pytest.fixture
def ledger():
    return FakeLedger({"alice": 150})


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def reconciliation():
    return RecordingReconciliation()


@pytest.fixture
def engine(store, ledger, notifier, reconciliation):
    context = ShopContext.create(CATALOG, ledger_enabled=True)
    return TransactionEngine(
        context, store, notifier,
        ledger=ledger, reconciliation=reconciliation,
    )


@pytest.fixture
def free_engine(store, ledger, notifier):
    context = ShopContext.create(CATALOG, ledger_enabled=False)
    return TransactionEngine(context, store, notifier, ledger=ledger)


@pytest.fixture
def actions(engine):
    return TagsActions(engine, data_location="sqlite+aiosqlite:///test.db")
