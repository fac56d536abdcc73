from storecart.application.session_reader import SessionReader
from storecart.core.constants import SESSION_KEY
from storecart.domain.cart import LineItem, normalize_cart, parse_cart
from storecart.domain.order import PaymentInfo
from storecart.domain.session import Session, session_id
from storecart.domain.value_objects import CardBrand, Scope


def test_line_item_coerces_loose_input() -> None:
    item = LineItem.model_validate({"id": 12, "title": None, "qty": None, "color": "red"})

    assert item.id == "12"
    assert item.title == ""
    assert item.qty == 1
    assert item.to_dict()["color"] == "red"


def test_negative_quantity_reads_as_zero_and_is_normalized_away() -> None:
    items = parse_cart([{"id": "a", "qty": -2}, {"id": "b", "qty": 1}, {"id": "b", "qty": 2}])

    assert [(i.id, i.qty) for i in normalize_cart(items)] == [("b", 3)]


def test_parse_cart_rejects_non_lists() -> None:
    assert parse_cart({"id": "a"}) == []
    assert parse_cart(None) == []


def test_session_without_id_is_guest() -> None:
    assert session_id(Session(name="Ana")) is None
    assert session_id(Session(id="  ")) is None
    assert session_id(Session(id=5)) == "5"
    assert session_id(None) is None


def test_session_reader_reflects_latest_write(store) -> None:
    reader = SessionReader(store)
    assert reader.current_session() is None

    store.set(Scope.LONG_TERM, SESSION_KEY, {"id": "u1", "name": "Ana", "role": "x"})
    assert reader.current_user_id() == "u1"

    store.set(Scope.LONG_TERM, SESSION_KEY, ["not", "a", "record"])
    assert reader.current_session() is None


def test_payment_info_keeps_only_last_four() -> None:
    payment = PaymentInfo.from_card_number("5555555555554444")

    assert payment.masked == "**** **** **** 4444"
    assert payment.last4 == "4444"
    assert payment.brand == "MASTERCARD"
    assert "5555" not in payment.model_dump_json()


def test_card_brand_detection() -> None:
    assert CardBrand.detect("4242424242424242") is CardBrand.VISA
    assert CardBrand.detect("378282246310005") is CardBrand.AMEX
    assert CardBrand.detect("6011111111111117") is CardBrand.DISCOVER
    assert CardBrand.detect("2223003122003222") is CardBrand.MASTERCARD
    assert CardBrand.detect("9999999999999") is CardBrand.GENERIC
