"""Transaction Engine — buy/sell state machines against in-memory adapters.

Tests cover:
    - Validation failures (not found, already owned, insufficient funds, no tag)
      perform zero mutation and emit no event
    - Successful buy/sell move ownership, ledger and events together
    - Disabled ledger: no ledger calls, price and refund 0
    - Adapter failure on ownership write aborts; ledger failure after commit is recorded
    - End-to-end scenario with the two-tag catalog
"""

import pytest

from tagshop.core.catalog import strip_formatting
from tagshop.core.domain_types import LedgerOperation, TransactionKind
from tagshop.core.errors import (
    DatabaseError, InsufficientFundsError, InvalidIdentityError, LedgerError,
    NoTagOwnedError, TagAlreadyOwnedError, TagNotFoundError,
)
from tagshop.core.shop_context import ShopContext
from tagshop.services.tag_transactions import TransactionEngine


# -- Buy: validation ---------------------------------------------------------

@pytest.mark.parametrize("tag_id", [-1, 2, 99])
async def test_buy_unknown_tag_fails_without_any_adapter_call(
    engine, store, ledger, notifier, tag_id,
):
    with pytest.raises(TagNotFoundError):
        await engine.buy("alice", tag_id)
    assert store.calls == []
    assert ledger.calls == []
    assert notifier.events == []


@pytest.mark.parametrize("name", ["   ", "x" * 65])
async def test_invalid_name_fails_before_any_adapter_call(
    engine, store, ledger, notifier, name,
):
    with pytest.raises(InvalidIdentityError):
        await engine.buy(name, 0)
    with pytest.raises(InvalidIdentityError):
        await engine.sell(name)
    assert store.calls == []
    assert ledger.calls == []
    assert notifier.events == []


async def test_buy_already_owned_tag_leaves_record_unchanged(
    engine, store, ledger, notifier,
):
    store.rows["alice"] = 0
    with pytest.raises(TagAlreadyOwnedError):
        await engine.buy("alice", 0)
    assert store.rows == {"alice": 0}
    assert ledger.calls == []
    assert notifier.events == []


async def test_buy_with_insufficient_funds_reports_deficit(
    engine, store, ledger, notifier,
):
    ledger.balances["alice"] = 120
    with pytest.raises(InsufficientFundsError) as exc:
        await engine.buy("alice", 1)
    assert exc.value.deficit == 380
    assert store.rows == {}
    assert ledger.balances["alice"] == 120
    assert notifier.events == []


async def test_buy_with_exact_balance_succeeds(engine, ledger):
    ledger.balances["alice"] = 100
    outcome = await engine.buy("alice", 0)
    assert outcome.price_paid == 100
    assert ledger.balances["alice"] == 0


# -- Buy: success ------------------------------------------------------------

async def test_buy_charges_price_sets_ownership_and_emits_one_event(
    engine, store, ledger, notifier,
):
    outcome = await engine.buy("alice", 0)

    assert outcome.price_paid == 100
    assert outcome.ledger_settled
    assert ledger.balances["alice"] == 50
    assert store.rows["alice"] == 0
    assert len(notifier.events) == 1
    event = notifier.events[0]
    assert event.kind == TransactionKind.BUY
    assert event.identity == "alice"
    assert event.tag_id == 0
    assert event.amount == 100


async def test_buy_casefolds_identity_but_labels_with_player_name(engine, store, ledger):
    ledger.balances["alice"] = 150
    outcome = await engine.buy("Alice", 0)
    assert outcome.identity == "alice"
    assert store.rows == {"alice": 0}
    assert outcome.label_effect.player_name == "Alice"
    assert strip_formatting(outcome.label_effect.label) == "Alice VIP"


async def test_buy_uses_base_label_and_configured_template(store, ledger, notifier):
    context = ShopContext.create(
        ["&6VIP:10"], display_name_format="[{tag}] {label}", ledger_enabled=True,
    )
    engine = TransactionEngine(context, store, notifier, ledger=ledger)
    outcome = await engine.buy("alice", 0, base_label="Sir Alice")
    assert outcome.label_effect.label == "[§6VIP§r] Sir Alice"


async def test_buy_replaces_a_different_owned_tag(engine, store, ledger):
    store.rows["alice"] = 1
    await engine.buy("alice", 0)
    assert store.rows["alice"] == 0
    assert ledger.balances["alice"] == 50


async def test_buy_orders_ownership_write_before_ledger_subtract(engine, store, ledger):
    await engine.buy("alice", 0)
    assert [c[0] for c in store.calls] == ["get_tag", "set_tag"]
    assert [c[0] for c in ledger.calls] == ["get_balance", "subtract"]


# -- Buy: ledger disabled ----------------------------------------------------

async def test_buy_with_ledger_disabled_is_free_and_skips_ledger(
    free_engine, store, ledger, notifier,
):
    outcome = await free_engine.buy("alice", 1)
    assert outcome.price_paid == 0
    assert store.rows["alice"] == 1
    assert ledger.calls == []
    assert notifier.events[0].amount == 0


def test_ledger_enabled_without_ledger_is_rejected(store, notifier):
    context = ShopContext.create(["VIP:100"], ledger_enabled=True)
    with pytest.raises(ValueError):
        TransactionEngine(context, store, notifier)


# -- Buy: adapter failures ---------------------------------------------------

async def test_buy_store_write_failure_aborts_before_ledger(
    engine, store, ledger, notifier,
):
    store.fail_on.add("set_tag")
    with pytest.raises(DatabaseError):
        await engine.buy("alice", 0)
    assert ledger.balances["alice"] == 150
    assert ("subtract", "alice", 100) not in ledger.calls
    assert notifier.events == []


async def test_buy_balance_read_failure_propagates_without_mutation(
    engine, store, ledger,
):
    ledger.fail_on.add("get_balance")
    with pytest.raises(LedgerError):
        await engine.buy("alice", 0)
    assert store.rows == {}


async def test_buy_ledger_subtract_failure_keeps_ownership_and_records_discrepancy(
    engine, store, ledger, notifier, reconciliation,
):
    ledger.fail_on.add("subtract")
    outcome = await engine.buy("alice", 0)

    assert not outcome.ledger_settled
    assert store.rows["alice"] == 0
    assert ledger.balances["alice"] == 150
    assert len(notifier.events) == 1
    [discrepancy] = reconciliation.discrepancies
    assert discrepancy.operation == LedgerOperation.SUBTRACT
    assert discrepancy.amount == 100
    assert discrepancy.identity == "alice"


# -- Sell --------------------------------------------------------------------

async def test_sell_without_tag_fails_and_emits_nothing(engine, ledger, notifier):
    with pytest.raises(NoTagOwnedError):
        await engine.sell("alice")
    assert notifier.events == []
    assert [c[0] for c in ledger.calls] == []


async def test_sell_clears_ownership_refunds_price_and_emits_one_event(
    engine, store, ledger, notifier,
):
    store.rows["alice"] = 1
    outcome = await engine.sell("Alice")

    assert outcome.refund == 500
    assert outcome.tag_id == 1
    assert "alice" not in store.rows
    assert ledger.balances["alice"] == 650
    assert outcome.label_effect.label == "Alice"
    assert len(notifier.events) == 1
    assert notifier.events[0].kind == TransactionKind.SELL


async def test_sell_with_ledger_disabled_refunds_nothing(free_engine, store, ledger):
    store.rows["alice"] = 0
    outcome = await free_engine.sell("alice")
    assert outcome.refund == 0
    assert store.rows == {}
    assert ledger.calls == []


async def test_sell_stale_tag_id_refunds_zero(engine, store, ledger, notifier):
    store.rows["alice"] = 7
    outcome = await engine.sell("alice")
    assert outcome.refund == 0
    assert store.rows == {}
    assert [c[0] for c in ledger.calls] == []
    assert notifier.events[0].tag_id == 7


async def test_sell_clear_failure_leaves_tag_and_balance(
    engine, store, ledger, notifier,
):
    store.rows["alice"] = 0
    store.fail_on.add("clear_tag")
    with pytest.raises(DatabaseError):
        await engine.sell("alice")
    assert store.rows["alice"] == 0
    assert ledger.balances["alice"] == 150
    assert notifier.events == []


async def test_sell_refund_failure_is_recorded(
    engine, store, ledger, reconciliation,
):
    store.rows["alice"] = 0
    ledger.fail_on.add("add")
    outcome = await engine.sell("alice")
    assert not outcome.ledger_settled
    assert store.rows == {}
    assert reconciliation.discrepancies[0].operation == LedgerOperation.ADD


# -- End to end --------------------------------------------------------------

async def test_buy_then_fail_then_sell_scenario(engine, store, ledger, notifier):
    bought = await engine.buy("alice", 0)
    assert bought.price_paid == 100
    assert ledger.balances["alice"] == 50
    assert store.rows["alice"] == 0
    assert strip_formatting(bought.label_effect.label) == "alice VIP"

    with pytest.raises(InsufficientFundsError) as exc:
        await engine.buy("alice", 1)
    assert exc.value.deficit == 450
    assert ledger.balances["alice"] == 50
    assert store.rows["alice"] == 0

    sold = await engine.sell("alice")
    assert sold.refund == 100
    assert ledger.balances["alice"] == 150
    assert await engine.current_tag("alice") is None
    assert sold.label_effect.label == "alice"
    assert [e.kind for e in notifier.events] == [
        TransactionKind.BUY, TransactionKind.SELL,
    ]
