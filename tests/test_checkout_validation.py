"""Tests for checkout form rules and their order."""
from __future__ import annotations

import pytest

from storecart.application.checkout.validation import CheckoutForm, validate_checkout
from storecart.core.exceptions import EmptyCartException, ValidationException
from storecart.domain.cart import LineItem

ITEMS = [LineItem(id="a", price="$5.00", qty=1)]


def _form(**overrides) -> CheckoutForm:
    values = {
        "name": "Ana Lopez",
        "email": "Ana@Example.com ",
        "address": "Calle Nueva 45",
        "phone": "555",
        "notes": "",
        "card_number": "4242 4242 4242 4242",
        "card_expiry": "12/30",
        "card_cvc": "123",
    }
    values.update(overrides)
    return CheckoutForm(**values)


def test_valid_form_is_cleaned() -> None:
    validated = validate_checkout(_form(), ITEMS)

    assert validated.email == "ana@example.com"
    assert validated.card_digits == "4242424242424242"


@pytest.mark.parametrize(
    "overrides, error_key",
    [
        ({"name": "  "}, "name_required"),
        ({"email": "ana@example"}, "email_invalid"),
        ({"email": "ana example@x.com"}, "email_invalid"),
        ({"address": ""}, "address_required"),
        ({"card_number": "123"}, "card_invalid"),
        ({"card_number": "4242-4242-4242-4242"}, "card_invalid"),
        ({"card_number": "1" * 20}, "card_invalid"),
        ({"card_cvc": "12"}, "cvc_invalid"),
        ({"card_cvc": "12345"}, "cvc_invalid"),
        ({"card_expiry": "13/30"}, "expiry_invalid"),
        ({"card_expiry": "1/30"}, "expiry_invalid"),
        ({"card_expiry": "12/\u0663\u0660"}, "expiry_invalid"),
        ({"card_cvc": "\u0661\u0662\u0663"}, "cvc_invalid"),
    ],
)
def test_invalid_field_is_reported(overrides, error_key) -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_checkout(_form(**overrides), ITEMS)

    assert exc_info.value.error_key == error_key
    assert exc_info.value.message


def test_first_failing_rule_wins() -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_checkout(_form(name="", email="bad", card_number="1"), ITEMS)

    assert exc_info.value.field == "name"


def test_empty_cart_is_checked_before_card() -> None:
    with pytest.raises(EmptyCartException) as exc_info:
        validate_checkout(_form(card_number="1"), [])

    assert exc_info.value.error_key == "cart_empty"


def test_card_lengths_at_bounds_are_accepted() -> None:
    validate_checkout(_form(card_number="1" * 12, card_cvc="1234"), ITEMS)
    validate_checkout(_form(card_number="1" * 19, card_expiry="01/00"), ITEMS)
