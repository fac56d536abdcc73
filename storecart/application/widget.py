"""Public entry points of the cart widget and its cross-tab wiring."""
from __future__ import annotations

import logging
import uuid
from typing import Any

from storecart.application.cart_merge import CartMergeEngine, MergeResult
from storecart.application.cart_panel import PanelView, project
from storecart.application.cart_store import CartStore
from storecart.application.checkout import (
    CheckoutForm,
    CheckoutPipeline,
    CheckoutResult,
    fill_with_test_data,
)
from storecart.application.order_ledger import OrderLedger
from storecart.application.product import product_item_from_record
from storecart.application.session_reader import SessionReader
from storecart.core.config import Settings
from storecart.core.constants import CART_KEY_PREFIX, SESSION_KEY
from storecart.core.events import StorageEvent, Subscription
from storecart.core.pricing import format_money
from storecart.domain.cart import LineItem
from storecart.integrations.storage import PersistentStore

logger = logging.getLogger(__name__)


class CartWidget:
    """One browser tab's cart: panel state, checkout and storage listeners.

    Every entry point works before ``start()``; the panel state is created
    on first use.
    """

    def __init__(
        self,
        store: PersistentStore,
        settings: Settings | None = None,
        *,
        current_url: str = "",
    ) -> None:
        self.settings = settings or Settings()
        if store.origin is None:
            store.origin = uuid.uuid4().hex
        self.tab_id = store.origin
        self.store = store
        self.sessions = SessionReader(store)
        self.cart = CartStore(store, self.sessions)
        self.merger = CartMergeEngine(store, self.sessions)
        self.ledger = OrderLedger(store)
        self.checkout = CheckoutPipeline(
            store,
            self.cart,
            self.ledger,
            self.sessions,
            delay=self.settings.checkout_delay,
            navigation=self.settings.navigation,
            current_url=current_url,
        )
        self.cart.on_change(self._on_cart_change)

        self._panel: PanelView | None = None
        self._subscriptions: list[Subscription] = []
        self.is_open = False
        self.clear_confirm_open = False
        self.render_count = 0

    # ---------------------------------------------------------------- lifecycle

    def start(self) -> MergeResult:
        """Page-load wiring: listen for other tabs, merge, render."""
        channel = self.store.channel
        if channel is not None and not self._subscriptions:
            self._subscriptions = [
                channel.subscribe(self._on_session_event, owner=self.tab_id, key=SESSION_KEY),
                channel.subscribe(self._on_cart_event, owner=self.tab_id, prefix=CART_KEY_PREFIX),
            ]
        result = self._merge()
        self.render()
        return result

    def refresh_session(self) -> MergeResult:
        """Call after this tab itself logged in or out."""
        result = self._merge()
        self.render()
        return result

    def stop(self) -> None:
        channel = self.store.channel
        if channel is not None:
            for subscription in self._subscriptions:
                channel.unsubscribe(subscription)
        self._subscriptions = []
        self.checkout.close()

    # ------------------------------------------------------------------ panel

    @property
    def panel(self) -> PanelView:
        if self._panel is None:
            return self.render()
        return self._panel

    def render(self) -> PanelView:
        self._panel = project(self.cart.load(), self.settings.display)
        self.render_count += 1
        return self._panel

    @property
    def badge(self) -> int:
        return self.panel.count

    def open_cart(self) -> None:
        if self._panel is None:
            self.render()
        self.is_open = True

    def close_cart(self) -> None:
        self.is_open = False

    # ---------------------------------------------------------------- cart API

    def add_to_cart(self, record: dict[str, Any] | None) -> list[LineItem]:
        """Entry point for product modals and other producers."""
        if not record or not record.get("id"):
            return self.get_cart_items()
        record = dict(record)
        price = record.get("price")
        if isinstance(price, (int, float)) and not isinstance(price, bool):
            record["price"] = format_money(float(price), self.settings.display.currency)
        if not record.get("qty"):
            record["qty"] = 1
        return self.cart.add(record)

    def add_product(
        self,
        title: str | None,
        img: str | None = None,
        price: Any = "",
        desc: str | None = None,
    ) -> list[LineItem]:
        """Product-detail modal: add the shown product."""
        return self.add_to_cart(product_item_from_record(title, img, price, desc))

    def get_cart_items(self) -> list[LineItem]:
        return self.cart.load()

    def remove_item(self, item_id: str) -> list[LineItem]:
        return self.cart.remove(item_id)

    def change_quantity(self, item_id: str, delta: int) -> list[LineItem]:
        return self.cart.change_quantity(item_id, delta)

    def clear_cart(self) -> None:
        self.cart.clear()

    def request_clear(self) -> bool:
        """Show the "empty cart?" confirmation; no-op if already shown."""
        if self.clear_confirm_open:
            return False
        self.clear_confirm_open = True
        return True

    def confirm_clear(self) -> None:
        if self.clear_confirm_open:
            self.clear_cart()
        self.clear_confirm_open = False

    def cancel_clear(self) -> None:
        self.clear_confirm_open = False

    # ---------------------------------------------------------------- checkout

    def open_checkout(self) -> CheckoutForm:
        return self.checkout.open_form()

    def fill_test_data(self) -> CheckoutForm:
        """Payment form demo button; opens the form first if needed."""
        return fill_with_test_data(self.checkout.open_form())

    def close_checkout(self) -> bool:
        return self.checkout.close()

    async def submit_checkout(self, form: CheckoutForm | None = None) -> CheckoutResult:
        result = await self.checkout.submit(form)
        if result.ok:
            self.close_cart()
        return result

    def dismiss(self) -> None:
        """Escape key / overlay click: close whatever overlay is on top."""
        if self.clear_confirm_open:
            self.cancel_clear()
        elif self.checkout.is_open:
            self.checkout.close()
        else:
            self.close_cart()

    # ----------------------------------------------------------------- events

    def _merge(self) -> MergeResult:
        try:
            return self.merger.merge_if_needed()
        except Exception as exc:
            logger.error("Guest cart merge failed: %s", exc)
            return MergeResult(False, reason="error")

    def _on_cart_change(self, items: list[LineItem], open_panel: bool) -> None:
        self._panel = project(items, self.settings.display)
        self.render_count += 1
        if open_panel:
            self.open_cart()

    def _on_session_event(self, event: StorageEvent) -> None:
        try:
            self.merger.on_session_change()
        except Exception as exc:
            logger.error("Guest cart merge failed: %s", exc)
        self.render()

    def _on_cart_event(self, event: StorageEvent) -> None:
        self.render()

