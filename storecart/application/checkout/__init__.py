"""Checkout: form validation, simulated payment and order commit."""

from .fixtures import fill_with_test_data
from .navigation import confirmation_url, should_show_floating_cart
from .pipeline import CheckoutPipeline, CheckoutResult
from .validation import CheckoutForm, ValidatedCheckout, validate_checkout

__all__ = [
    "CheckoutForm",
    "CheckoutPipeline",
    "CheckoutResult",
    "ValidatedCheckout",
    "confirmation_url",
    "fill_with_test_data",
    "should_show_floating_cart",
    "validate_checkout",
]
