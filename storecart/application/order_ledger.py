"""Append-only order history plus the transient last-order pointer."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from storecart.core.constants import LAST_ORDER_FALLBACK_KEY, LAST_ORDER_KEY, ORDERS_KEY
from storecart.core.exceptions import LedgerWriteError
from storecart.domain.order import Order
from storecart.domain.value_objects import Scope
from storecart.integrations.storage import PersistentStore

logger = logging.getLogger(__name__)


def _parse_order(raw: Any) -> Order | None:
    if not isinstance(raw, dict):
        return None
    try:
        return Order.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Skipping unreadable order %r: %s", raw.get("id"), exc)
        return None


class OrderLedger:
    """Orders are global, independent of which cart produced them."""

    def __init__(self, store: PersistentStore) -> None:
        self._store = store

    def _raw_orders(self) -> list[Any]:
        raw = self._store.get(Scope.LONG_TERM, ORDERS_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Order ledger is not a list; treating as empty")
            return []
        return raw

    def all(self) -> list[Order]:
        orders = [_parse_order(entry) for entry in self._raw_orders()]
        return [order for order in orders if order is not None]

    def __len__(self) -> int:
        return len(self._raw_orders())

    def append(self, order: Order) -> None:
        """Persist an order; raises ``LedgerWriteError`` if it was not stored."""
        existing = self._raw_orders()
        existing.append(order.to_record())
        if not self._store.set(Scope.LONG_TERM, ORDERS_KEY, existing):
            raise LedgerWriteError(order.id)
        logger.info("Order %s stored (ledger size %d)", order.id, len(existing))

    def find(self, order_id: str) -> Order | None:
        for entry in reversed(self._raw_orders()):
            if isinstance(entry, dict) and entry.get("id") == order_id:
                return _parse_order(entry)
        return None

    def remember_last(self, order: Order) -> None:
        """Bridge the hand-off to the confirmation view; failures are tolerated."""
        payload = order.to_record()
        if not self._store.set(Scope.SHORT_TERM, LAST_ORDER_KEY, payload):
            logger.warning("Could not write last-order pointer for %s", order.id)
        self._store.set(Scope.LONG_TERM, LAST_ORDER_FALLBACK_KEY, payload)

    def last(self) -> Order | None:
        order = _parse_order(self._store.get(Scope.SHORT_TERM, LAST_ORDER_KEY))
        if order is None:
            order = _parse_order(self._store.get(Scope.LONG_TERM, LAST_ORDER_FALLBACK_KEY))
        return order

    def clear_last(self) -> None:
        self._store.remove(Scope.SHORT_TERM, LAST_ORDER_KEY)
        self._store.remove(Scope.LONG_TERM, LAST_ORDER_FALLBACK_KEY)
