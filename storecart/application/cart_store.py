"""Cart persistence for the active guest or user namespace."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from storecart.application.session_reader import SessionReader
from storecart.core.constants import GUEST_CART_KEY, USER_CART_PREFIX
from storecart.core.pricing import calc_cart_total
from storecart.domain.cart import LineItem, dump_cart, normalize_cart, parse_cart, parse_item
from storecart.domain.value_objects import Scope
from storecart.integrations.storage import PersistentStore

logger = logging.getLogger(__name__)

# listener(items, open_panel)
ChangeListener = Callable[[list[LineItem], bool], Any]


def user_cart_key(user_id: str) -> str:
    return f"{USER_CART_PREFIX}{user_id}"


def cart_key_for(user_id: str | None) -> str:
    return user_cart_key(user_id) if user_id else GUEST_CART_KEY


class CartStore:
    """Load, mutate and save the cart under the key chosen by the session.

    The key is re-derived on every operation, so a login or logout written
    by another tab is honoured on the next call. Writes are plain
    read-modify-write: concurrent writers to the same key resolve as
    last-write-wins.
    """

    def __init__(self, store: PersistentStore, sessions: SessionReader) -> None:
        self._store = store
        self._sessions = sessions
        self._listeners: list[ChangeListener] = []

    def on_change(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def active_key(self) -> str:
        return cart_key_for(self._sessions.current_user_id())

    def load(self) -> list[LineItem]:
        raw = self._store.get(Scope.LONG_TERM, self.active_key())
        return normalize_cart(parse_cart(raw))

    def save(self, items: Iterable[LineItem]) -> bool:
        key = self.active_key()
        saved = self._store.set(Scope.LONG_TERM, key, dump_cart(list(items)))
        if not saved:
            logger.warning("Cart %s was not persisted", key)
        return saved

    def add(self, item: LineItem | dict[str, Any]) -> list[LineItem]:
        incoming = parse_item(item)
        if incoming is None:
            logger.warning("Ignoring cart add without a usable id")
            return self.load()
        items = self.load()
        for existing in items:
            if existing.id == incoming.id:
                existing.qty = (existing.qty or 1) + (incoming.qty or 1)
                break
        else:
            if incoming.qty <= 0:
                incoming.qty = 1
            items.append(incoming)
        self._commit(items, open_panel=True)
        return items

    def remove(self, item_id: str) -> list[LineItem]:
        items = [item for item in self.load() if item.id != item_id]
        self._commit(items)
        return items

    def change_quantity(self, item_id: str, delta: int) -> list[LineItem]:
        items = self.load()
        for idx, item in enumerate(items):
            if item.id != item_id:
                continue
            item.qty = max(0, (item.qty or 1) + int(delta))
            if item.qty == 0:
                del items[idx]
            break
        else:
            return items
        self._commit(items)
        return items

    def clear(self) -> bool:
        return self._commit([])

    @staticmethod
    def total(items: Iterable[LineItem]) -> float:
        return calc_cart_total(items)

    def _commit(self, items: list[LineItem], open_panel: bool = False) -> bool:
        saved = self.save(items)
        for listener in list(self._listeners):
            try:
                listener(items, open_panel)
            except Exception as exc:
                logger.error("Cart change listener failed: %s", exc)
        return saved
