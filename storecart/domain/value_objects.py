"""Value objects for the checkout domain."""
from __future__ import annotations

from enum import Enum


class Scope(str, Enum):
    """Storage lifetimes available to the widget."""

    LONG_TERM = "long_term"
    SHORT_TERM = "short_term"


class CheckoutState(str, Enum):
    """Checkout pipeline states."""

    IDLE = "idle"
    FORM_OPEN = "form_open"
    VALIDATING = "validating"
    PROCESSING = "processing"
    COMMITTED = "committed"


class CardBrand(str, Enum):
    VISA = "VISA"
    MASTERCARD = "MASTERCARD"
    AMEX = "AMEX"
    DISCOVER = "DISCOVER"
    GENERIC = "CARD"

    @classmethod
    def detect(cls, digits: str) -> "CardBrand":
        """Guess the card network from the PAN prefix."""
        if digits.startswith("4"):
            return cls.VISA
        if digits[:2] in {"51", "52", "53", "54", "55"} or (
            digits[:4].isdigit() and 2221 <= int(digits[:4] or 0) <= 2720
        ):
            return cls.MASTERCARD
        if digits[:2] in {"34", "37"}:
            return cls.AMEX
        if digits.startswith("6011") or digits.startswith("65"):
            return cls.DISCOVER
        return cls.GENERIC
