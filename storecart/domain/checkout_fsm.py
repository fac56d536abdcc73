"""Checkout state transition rules (single source of truth)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from storecart.domain.value_objects import CheckoutState


ALLOWED_TRANSITIONS: Mapping[CheckoutState, frozenset[CheckoutState]] = {
    CheckoutState.IDLE: frozenset({CheckoutState.FORM_OPEN}),
    CheckoutState.FORM_OPEN: frozenset(
        {
            CheckoutState.VALIDATING,
            CheckoutState.IDLE,
        }
    ),
    CheckoutState.VALIDATING: frozenset(
        {
            CheckoutState.PROCESSING,
            CheckoutState.FORM_OPEN,
        }
    ),
    CheckoutState.PROCESSING: frozenset(
        {
            CheckoutState.COMMITTED,
            # cancelled before the payment timer fired
            CheckoutState.IDLE,
            # ledger write failed
            CheckoutState.FORM_OPEN,
        }
    ),
    CheckoutState.COMMITTED: frozenset({CheckoutState.IDLE, CheckoutState.FORM_OPEN}),
}

CANCELLABLE_STATES = frozenset({CheckoutState.FORM_OPEN, CheckoutState.PROCESSING})


@dataclass(frozen=True, slots=True)
class TransitionValidationResult:
    allowed: bool
    reason: str | None = None


def validate_checkout_transition(
    current: CheckoutState | str,
    target: CheckoutState | str,
) -> TransitionValidationResult:
    """Check a transition against the checkout matrix."""
    try:
        current_state = CheckoutState(current)
    except ValueError:
        return TransitionValidationResult(False, f"Unsupported current state: {current}")
    try:
        target_state = CheckoutState(target)
    except ValueError:
        return TransitionValidationResult(False, f"Unsupported state: {target}")

    if target_state not in ALLOWED_TRANSITIONS.get(current_state, frozenset()):
        return TransitionValidationResult(
            False,
            f"Transition '{current_state.value} -> {target_state.value}' is not allowed.",
        )
    return TransitionValidationResult(True)
