from storecart.application.checkout.navigation import (
    confirmation_url,
    encode_component,
    should_show_floating_cart,
)
from storecart.core.config import NavigationConfig


def test_confirmation_url_resolves_next_to_current_page() -> None:
    url = confirmation_url("https://shop.test/tienda/index.html?q=1#x", "order_1")

    assert url == "https://shop.test/tienda/checkout.html?order=order_1"


def test_confirmation_url_goes_up_from_categories_folder() -> None:
    url = confirmation_url("file:///C:/site/Categorias/zapatos.html", "order_1")

    assert url == "file:///C:/site/checkout.html?order=order_1"


def test_confirmation_url_normalizes_backslashes() -> None:
    url = confirmation_url("file:///C:\\site\\categorias\\zapatos.html", "order_1")

    assert url == "file:///C:/site/checkout.html?order=order_1"


def test_confirmation_url_without_location_falls_back_to_relative() -> None:
    assert confirmation_url("", "a b") == "checkout.html?order=a%20b"


def test_confirmation_url_uses_configured_page() -> None:
    nav = NavigationConfig(confirmation_page="gracias.html", categories_segment="/shop/")

    url = confirmation_url("https://x.test/shop/item.html", "o/1", nav)

    assert url == "https://x.test/gracias.html?order=o%2F1"


def test_encode_component_matches_uri_component_rules() -> None:
    assert encode_component("Mug|img/a b.png") == "Mug%7Cimg%2Fa%20b.png"
    assert encode_component("it's (new)!") == "it's%20(new)!"


def test_floating_cart_hidden_on_registration_pages() -> None:
    assert should_show_floating_cart("/index.html") is True
    assert should_show_floating_cart("/Registro.html") is False
    assert should_show_floating_cart("/index.html", "#register") is False
