"""Fold the guest cart into the signed-in user's cart after login."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from storecart.application.cart_store import user_cart_key
from storecart.application.session_reader import SessionReader
from storecart.core.constants import GUEST_CART_KEY
from storecart.domain.cart import LineItem, dump_cart, parse_cart
from storecart.domain.value_objects import Scope
from storecart.integrations.storage import PersistentStore

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    merged: bool
    user_id: str | None = None
    items: list[LineItem] = field(default_factory=list)
    reason: str | None = None


def merge_carts(user_items: list[LineItem], guest_items: list[LineItem]) -> list[LineItem]:
    """Sum quantities by id, keeping the first-seen fields and order."""
    merged: dict[str, LineItem] = {}
    for item in [*user_items, *guest_items]:
        entry = merged.get(item.id)
        if entry is None:
            entry = item.model_copy(update={"qty": 0})
            merged[item.id] = entry
        entry.qty += item.qty or 1
    return [item for item in merged.values() if item.qty > 0]


class CartMergeEngine:
    """Runs the guest → user merge at most once per observed transition."""

    def __init__(self, store: PersistentStore, sessions: SessionReader) -> None:
        self._store = store
        self._sessions = sessions
        self._last_merged_user: str | None = None

    def merge_if_needed(self) -> MergeResult:
        user_id = self._sessions.current_user_id()
        if not user_id:
            self._last_merged_user = None
            return MergeResult(False, reason="guest")

        guest_raw = self._store.raw_get(Scope.LONG_TERM, GUEST_CART_KEY)
        if not guest_raw:
            self._last_merged_user = user_id
            return MergeResult(False, user_id=user_id, reason="no_guest_cart")

        guest_items = parse_cart(self._store.get(Scope.LONG_TERM, GUEST_CART_KEY))
        if not guest_items:
            self._last_merged_user = user_id
            return MergeResult(False, user_id=user_id, reason="empty_guest_cart")

        user_key = user_cart_key(user_id)
        user_items = parse_cart(self._store.get(Scope.LONG_TERM, user_key))
        merged = merge_carts(user_items, guest_items)

        if not self._store.set(Scope.LONG_TERM, user_key, dump_cart(merged)):
            logger.error("Guest cart merge into %s failed; guest cart kept", user_key)
            return MergeResult(False, user_id=user_id, reason="write_failed")

        # another tab may have merged and removed it in the meantime
        if self._store.raw_get(Scope.LONG_TERM, GUEST_CART_KEY) is not None:
            self._store.remove(Scope.LONG_TERM, GUEST_CART_KEY)

        self._last_merged_user = user_id
        logger.info(
            "Merged %d guest item(s) into cart of user %s (%d rows)",
            len(guest_items),
            user_id,
            len(merged),
        )
        return MergeResult(True, user_id=user_id, items=merged)

    def on_session_change(self) -> MergeResult:
        """Handle a session notification; redundant ones are no-ops."""
        user_id = self._sessions.current_user_id()
        if user_id and user_id == self._last_merged_user:
            if not self._store.raw_get(Scope.LONG_TERM, GUEST_CART_KEY):
                return MergeResult(False, user_id=user_id, reason="already_merged")
        return self.merge_if_needed()
