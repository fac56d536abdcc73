from __future__ import annotations

import pytest

from storecart.application.order_ledger import OrderLedger
from storecart.core.constants import LAST_ORDER_KEY, ORDERS_KEY
from storecart.core.exceptions import LedgerWriteError
from storecart.domain.cart import LineItem
from storecart.domain.order import CustomerInfo, Order, PaymentInfo, new_order_id, utc_timestamp
from storecart.domain.value_objects import Scope


def _order(order_id: str | None = None) -> Order:
    return Order(
        id=order_id or new_order_id(),
        user_id=None,
        customer=CustomerInfo(name="Ana", email="ana@example.com", address="Calle 1"),
        payment=PaymentInfo.from_card_number("4242424242424242"),
        items=(LineItem(id="a", price="$2.00", qty=2),),
        total=4.0,
        created_at=utc_timestamp(),
    )


def test_append_keeps_existing_orders(store, stored) -> None:
    ledger = OrderLedger(store)
    first, second = _order("order_1"), _order("order_2")

    ledger.append(first)
    ledger.append(second)

    assert [o.id for o in ledger.all()] == ["order_1", "order_2"]
    assert len(stored(ORDERS_KEY)) == 2
    assert ledger.find("order_1") == first


def test_append_failure_raises(store, long_term) -> None:
    ledger = OrderLedger(store)
    long_term.disabled = True

    with pytest.raises(LedgerWriteError):
        ledger.append(_order())


def test_corrupt_ledger_is_treated_as_empty(store, long_term) -> None:
    long_term.set_item(ORDERS_KEY, "not json")
    ledger = OrderLedger(store)

    assert ledger.all() == []
    ledger.append(_order("order_9"))
    assert [o.id for o in ledger.all()] == ["order_9"]


def test_last_order_pointer_lives_in_short_term_scope(store) -> None:
    ledger = OrderLedger(store)
    order = _order()

    ledger.remember_last(order)

    assert store.get(Scope.SHORT_TERM, LAST_ORDER_KEY)["id"] == order.id
    assert ledger.last() == order
    ledger.clear_last()
    assert ledger.last() is None


def test_orders_are_immutable() -> None:
    order = _order()

    with pytest.raises(Exception):
        order.total = 0  # type: ignore[misc]


def test_order_ids_are_unique() -> None:
    assert new_order_id(1.0) != new_order_id(1.0)
    assert new_order_id(1.0).startswith("order_1000_")


def test_stored_orders_use_camel_case_keys(store, stored) -> None:
    ledger = OrderLedger(store)
    order = _order("order_1").model_copy(update={"user_id": "7"})

    ledger.append(order)
    ledger.remember_last(order)

    record = stored(ORDERS_KEY)[0]
    assert record["userId"] == "7"
    assert "createdAt" in record
    assert "user_id" not in record and "created_at" not in record
    assert store.get(Scope.SHORT_TERM, LAST_ORDER_KEY)["userId"] == "7"
    assert ledger.find("order_1").user_id == "7"
