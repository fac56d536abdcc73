"""Checkout form rules; the first failing rule wins."""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field

from storecart.core.constants import CARD_MAX_DIGITS, CARD_MIN_DIGITS
from storecart.core.exceptions import EmptyCartException, ValidationException
from storecart.domain.cart import LineItem

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CARD_PATTERN = re.compile(rf"^[0-9]{{{CARD_MIN_DIGITS},{CARD_MAX_DIGITS}}}$")
CVC_PATTERN = re.compile(r"^[0-9]{3,4}$")
EXPIRY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/([0-9]{2})$")
_WHITESPACE = re.compile(r"\s+")

MESSAGES: dict[str, str] = {
    "name_required": "Ingresa tu nombre.",
    "email_invalid": "Email inválido.",
    "address_required": "Ingresa la dirección de envío.",
    "cart_empty": "El carrito está vacío.",
    "card_invalid": "Número de tarjeta inválido.",
    "cvc_invalid": "CVC inválido.",
    "expiry_invalid": "Expiración inválida (MM/AA).",
    "processing": "Procesando pago...",
    "ledger_write_failed": "No pudimos registrar tu pedido. Inténtalo de nuevo.",
    "not_open": "El formulario de pago no está abierto.",
    "cancelled": "Pago cancelado.",
    "prefilled": "Campos rellenados con datos de prueba.",
}


@dataclass
class CheckoutForm:
    """Values typed into the payment form, plus its identity and status line."""

    name: str = ""
    email: str = ""
    address: str = ""
    phone: str = ""
    notes: str = ""
    card_number: str = ""
    card_expiry: str = ""
    card_cvc: str = ""
    form_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    message: str = ""

    def clear_fields(self) -> None:
        self.name = self.email = self.address = self.phone = self.notes = ""
        self.card_number = self.card_expiry = self.card_cvc = ""


@dataclass(frozen=True)
class ValidatedCheckout:
    """Cleaned form values. Card digits live only as long as this object."""

    name: str
    email: str
    address: str
    phone: str
    notes: str
    card_digits: str


def _fail(field_name: str, key: str) -> ValidationException:
    return ValidationException(field_name, MESSAGES[key], key)


def validate_checkout(form: CheckoutForm, items: list[LineItem]) -> ValidatedCheckout:
    """Apply the checkout rules in order.

    Raises:
        ValidationException: first failing field, with a user-facing message
        EmptyCartException: ``items`` is empty
    """
    name = (form.name or "").strip()
    email = (form.email or "").strip().lower()
    address = (form.address or "").strip()
    phone = (form.phone or "").strip()
    notes = (form.notes or "").strip()

    if not name:
        raise _fail("name", "name_required")
    if not email or not EMAIL_PATTERN.match(email):
        raise _fail("email", "email_invalid")
    if not address:
        raise _fail("address", "address_required")
    if not items:
        raise EmptyCartException(MESSAGES["cart_empty"])

    card_digits = _WHITESPACE.sub("", form.card_number or "")
    card_cvc = (form.card_cvc or "").strip()
    card_expiry = (form.card_expiry or "").strip()
    if not CARD_PATTERN.match(card_digits):
        raise _fail("card_number", "card_invalid")
    if not CVC_PATTERN.match(card_cvc):
        raise _fail("card_cvc", "cvc_invalid")
    if not EXPIRY_PATTERN.match(card_expiry):
        raise _fail("card_expiry", "expiry_invalid")

    return ValidatedCheckout(
        name=name,
        email=email,
        address=address,
        phone=phone,
        notes=notes,
        card_digits=card_digits,
    )
