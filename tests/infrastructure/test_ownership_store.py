"""SQL Ownership Store — persistence semantics against SQLite.

Tests cover:
    - Missing row reads as None
    - set_tag inserts then updates in place (one row per identity)
    - clear_tag deletes, and is a no-op for unknown identities
    - get_all returns the full identity → tag mapping
    - SQL failures surface as DatabaseError
"""

import pytest

from tagshop.core.domain_types import Identity, TagId
from tagshop.core.errors import AdapterFailureError, DatabaseError
from tagshop.infrastructure.ownership_store import SqlOwnershipStore

ALICE = Identity("alice")
BOB = Identity("bob")


@pytest.fixture
def store(db_manager):
    return SqlOwnershipStore(db_manager)


async def test_unknown_identity_has_no_tag(store):
    assert await store.get_tag(ALICE) is None


async def test_set_tag_inserts_then_updates(store):
    await store.set_tag(ALICE, TagId(0))
    assert await store.get_tag(ALICE) == 0

    await store.set_tag(ALICE, TagId(1))
    assert await store.get_tag(ALICE) == 1
    assert await store.get_all() == {"alice": 1}


async def test_clear_tag_removes_row(store):
    await store.set_tag(ALICE, TagId(0))
    await store.clear_tag(ALICE)
    assert await store.get_tag(ALICE) is None


async def test_clear_unknown_identity_is_noop(store):
    await store.clear_tag(BOB)
    assert await store.get_all() == {}


async def test_get_all_returns_every_row(store):
    await store.set_tag(BOB, TagId(1))
    await store.set_tag(ALICE, TagId(0))
    assert await store.get_all() == {"alice": 0, "bob": 1}


async def test_sql_failure_maps_to_database_error(store, drop_tables):
    await drop_tables()
    with pytest.raises(DatabaseError) as exc:
        await store.get_tag(ALICE)
    assert isinstance(exc.value, AdapterFailureError)
    assert exc.value.operation == "get_tag"
