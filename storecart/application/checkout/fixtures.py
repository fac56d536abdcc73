"""Random demo data for the "fill test data" button of the payment form."""
from __future__ import annotations

import random
import unicodedata

from storecart.application.checkout.validation import MESSAGES, CheckoutForm

SAMPLE_NAMES = ("Ana López", "Carlos Ruiz", "María Pérez", "Juan García", "Lucía Martínez")
SAMPLE_STREETS = (
    "Av. Central 123",
    "Calle Nueva 45",
    "Boulevard Sol 89",
    "Calle Las Flores 12",
    "Pasaje Verde 7",
)
TEST_CARD_NUMBER = "4242 4242 4242 4242"
TEST_CARD_EXPIRY = "12/30"
TEST_CARD_CVC = "123"


def remove_diacritics(text: str) -> str:
    """Strip accents so autofilled values pass strict browser validation."""
    decomposed = unicodedata.normalize("NFD", str(text or ""))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fill_with_test_data(form: CheckoutForm, rng: random.Random | None = None) -> CheckoutForm:
    rng = rng or random.Random()
    name = remove_diacritics(rng.choice(SAMPLE_NAMES))
    address = remove_diacritics(rng.choice(SAMPLE_STREETS))

    form.name = name
    form.email = f"{'.'.join(name.lower().split())}{rng.randint(100, 999)}@ejemplo.com"
    form.address = address
    form.phone = f"5{rng.randint(10_000_000, 99_999_999)}"
    form.card_number = TEST_CARD_NUMBER
    form.card_expiry = TEST_CARD_EXPIRY
    form.card_cvc = TEST_CARD_CVC
    form.message = MESSAGES["prefilled"]
    return form
