"""Checkout pipeline: validate, simulate payment, commit the order."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from storecart.application.cart_store import CartStore
from storecart.application.checkout.navigation import confirmation_url
from storecart.application.checkout.validation import (
    MESSAGES,
    CheckoutForm,
    ValidatedCheckout,
    validate_checkout,
)
from storecart.application.order_ledger import OrderLedger
from storecart.application.session_reader import SessionReader
from storecart.core.config import NavigationConfig
from storecart.core.constants import CHECKOUT_DELAY_SECONDS, SKIP_PREFILL_KEY
from storecart.core.exceptions import (
    CheckoutStateError,
    LedgerWriteError,
    ValidationException,
)
from storecart.core.pricing import calc_cart_total
from storecart.domain.checkout_fsm import CANCELLABLE_STATES, validate_checkout_transition
from storecart.domain.order import CustomerInfo, Order, PaymentInfo, new_order_id, utc_timestamp
from storecart.domain.value_objects import CheckoutState, Scope
from storecart.integrations.storage import PersistentStore

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    ok: bool
    state: CheckoutState
    error_key: str | None = None
    message: str = ""
    order: Order | None = None
    redirect_url: str | None = None
    cart_cleared: bool = True


class CheckoutPipeline:
    """Drives one tab's payment form through the checkout states.

    Only one form exists at a time. The simulated payment delay is an
    ``asyncio`` task registered under the form id; closing the form cancels
    it, and a commit that has started is never interrupted because it does
    not await.
    """

    def __init__(
        self,
        store: PersistentStore,
        cart: CartStore,
        ledger: OrderLedger,
        sessions: SessionReader,
        *,
        delay: float = CHECKOUT_DELAY_SECONDS,
        navigation: NavigationConfig | None = None,
        current_url: str = "",
    ) -> None:
        self._store = store
        self._cart = cart
        self._ledger = ledger
        self._sessions = sessions
        self.delay = delay
        self.navigation = navigation or NavigationConfig()
        self.current_url = current_url
        self._state = CheckoutState.IDLE
        self._form: CheckoutForm | None = None
        self._pending: dict[str, asyncio.Task] = {}
        self._cancelled: set[str] = set()

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def form(self) -> CheckoutForm | None:
        return self._form

    @property
    def is_open(self) -> bool:
        return self._form is not None

    def _transition(self, target: CheckoutState) -> None:
        result = validate_checkout_transition(self._state, target)
        if not result.allowed:
            raise CheckoutStateError(self._state.value, target.value)
        logger.debug("Checkout %s -> %s", self._state.value, target.value)
        self._state = target

    def open_form(self) -> CheckoutForm:
        """Open the payment form, or return the one already open."""
        if self._form is not None:
            return self._form

        self._transition(CheckoutState.FORM_OPEN)
        form = CheckoutForm()
        if self._consume_skip_prefill():
            form.clear_fields()
        else:
            session = self._sessions.current_session()
            if session is not None:
                form.name = session.name or ""
                form.email = session.email or ""
        self._form = form
        return form

    def close(self) -> bool:
        """Tear the form down (cancel button, escape, overlay click)."""
        form = self._form
        if form is None:
            return False
        task = self._pending.pop(form.form_id, None)
        if task is not None and not task.done():
            self._cancelled.add(form.form_id)
            task.cancel()
            logger.info("Checkout %s cancelled before payment completed", form.form_id)
        self._form = None
        if self._state in CANCELLABLE_STATES:
            self._transition(CheckoutState.IDLE)
        return True

    async def submit(self, form: CheckoutForm | None = None) -> CheckoutResult:
        form = form or self._form
        if form is None or self._form is None or form.form_id != self._form.form_id:
            return CheckoutResult(False, self._state, "not_open", MESSAGES["not_open"])
        if self._state is not CheckoutState.FORM_OPEN:
            return CheckoutResult(False, self._state, "not_open", MESSAGES["not_open"])

        form.message = ""
        self._transition(CheckoutState.VALIDATING)
        try:
            validated = validate_checkout(form, self._cart.load())
        except ValidationException as exc:
            self._transition(CheckoutState.FORM_OPEN)
            form.message = exc.message
            return CheckoutResult(False, self._state, exc.error_key, exc.message)

        self._transition(CheckoutState.PROCESSING)
        form.message = MESSAGES["processing"]
        task = asyncio.ensure_future(self._process(form, validated))
        self._pending[form.form_id] = task
        try:
            return await task
        except asyncio.CancelledError:
            if form.form_id not in self._cancelled:
                raise
            self._cancelled.discard(form.form_id)
            return CheckoutResult(False, self._state, "cancelled", MESSAGES["cancelled"])

    async def _process(self, form: CheckoutForm, validated: ValidatedCheckout) -> CheckoutResult:
        await asyncio.sleep(self.delay)
        self._pending.pop(form.form_id, None)
        return self.commit(form, validated)

    def commit(self, form: CheckoutForm, validated: ValidatedCheckout) -> CheckoutResult:
        """Persist the order and clear the cart; both happen or neither."""
        items = self._cart.load()
        if not items:
            self._transition(CheckoutState.FORM_OPEN)
            form.message = MESSAGES["cart_empty"]
            return CheckoutResult(False, self._state, "cart_empty", form.message)

        order = Order(
            id=new_order_id(),
            user_id=self._sessions.current_user_id(),
            customer=CustomerInfo(
                name=validated.name,
                email=validated.email,
                address=validated.address,
                phone=validated.phone,
                notes=validated.notes,
            ),
            payment=PaymentInfo.from_card_number(validated.card_digits),
            items=tuple(items),
            total=calc_cart_total(items),
            created_at=utc_timestamp(),
        )

        try:
            self._ledger.append(order)
        except LedgerWriteError as exc:
            logger.error("Checkout aborted, cart kept: %s", exc.message)
            self._transition(CheckoutState.FORM_OPEN)
            form.message = MESSAGES["ledger_write_failed"]
            return CheckoutResult(False, self._state, "ledger_write_failed", form.message)

        self._ledger.remember_last(order)
        self._store.set(Scope.SHORT_TERM, SKIP_PREFILL_KEY, "1")
        cart_cleared = self._cart.clear()
        if not cart_cleared:
            logger.error("Order %s stored but the cart could not be cleared", order.id)
        self._transition(CheckoutState.COMMITTED)
        self._form = None

        redirect = confirmation_url(self.current_url, order.id, self.navigation)
        logger.info("Order %s committed (total %.2f), redirecting to %s", order.id, order.total, redirect)
        return CheckoutResult(
            True, self._state, order=order, redirect_url=redirect, cart_cleared=cart_cleared
        )

    def _consume_skip_prefill(self) -> bool:
        if self._store.raw_get(Scope.SHORT_TERM, SKIP_PREFILL_KEY) is None:
            return False
        self._store.remove(Scope.SHORT_TERM, SKIP_PREFILL_KEY)
        return True
