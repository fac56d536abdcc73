import random

import pytest

from storecart.application.checkout.fixtures import fill_with_test_data, remove_diacritics
from storecart.application.checkout.validation import CheckoutForm, validate_checkout
from storecart.application.product import product_item_from_record
from storecart.domain.cart import LineItem


def test_product_record_id_is_stable_per_title_and_image() -> None:
    first = product_item_from_record("Café", "img/cafe.png", "$3.00", "Tostado")
    second = product_item_from_record("Café", "img/cafe.png", "$3.00")

    assert first["id"] == second["id"] == "Caf%C3%A9%7Cimg%2Fcafe.png"
    assert first["qty"] == 1
    assert first["desc"] == "Tostado"


def test_product_record_defaults() -> None:
    record = product_item_from_record(None)

    assert record["title"] == "Producto"
    assert record["id"] == "producto%7C"


def test_product_record_can_be_added(make_widget) -> None:
    widget = make_widget()

    widget.add_to_cart(product_item_from_record("Mug", "m.png", "$2.00"))
    widget.add_to_cart(product_item_from_record("Mug", "m.png", "$2.00"))

    assert [(i.title, i.qty) for i in widget.get_cart_items()] == [("Mug", 2)]


def test_remove_diacritics() -> None:
    assert remove_diacritics("Lucía Martínez") == "Lucia Martinez"


def test_test_data_passes_validation() -> None:
    form = fill_with_test_data(CheckoutForm(), random.Random(7))

    validated = validate_checkout(form, [LineItem(id="a")])

    assert validated.card_digits == "4242424242424242"
    assert form.email.endswith("@ejemplo.com")
    assert form.email.isascii()
    assert form.phone.startswith("5") and len(form.phone) == 9


def test_widget_adds_product_from_modal_fields(make_widget) -> None:
    widget = make_widget()

    widget.add_product("Taza", "img/taza.png", "$3.50")

    [item] = widget.get_cart_items()
    assert item.id == "Taza%7Cimg%2Ftaza.png"
    assert item.qty == 1
    assert widget.is_open is True


@pytest.mark.asyncio
async def test_widget_test_data_button_fills_a_submittable_form(make_widget) -> None:
    widget = make_widget()
    widget.add_product("Taza", "img/taza.png", "$3.50")

    form = widget.fill_test_data()

    assert widget.checkout.is_open is True
    assert form is widget.checkout.form
    assert form.card_number
    result = await widget.submit_checkout(form)
    assert result.ok is True
