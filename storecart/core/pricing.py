"""Shared helpers for cart prices, totals and quantities."""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from storecart.core.constants import DEFAULT_CURRENCY

_PRICE_STRIP = re.compile(r"[^0-9.,\-]")
_LEADING_FLOAT = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def parse_price(value: Any) -> float:
    """Parse a display or numeric price; anything unreadable counts as 0.

    Example:
        >>> parse_price("$1,50")
        1.5
        >>> parse_price("free")
        0.0
    """
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if number == number else 0.0
    cleaned = _PRICE_STRIP.sub("", str(value)).replace(",", ".", 1)
    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return 0.0
    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number


def item_quantity(item: Any) -> int:
    try:
        qty = int(_field(item, "qty") or 0)
    except (TypeError, ValueError):
        qty = 0
    return qty or 1


def calc_cart_total(items: Iterable[Any]) -> float:
    return sum(parse_price(_field(item, "price")) * item_quantity(item) for item in items)


def calc_cart_count(items: Iterable[Any]) -> int:
    return sum(item_quantity(item) for item in items)


def format_money(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    return f"{currency}{amount:.2f}"


def format_price(price: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """Render a stored price; numbers become currency strings, text is kept."""
    if price is None:
        return ""
    if isinstance(price, (int, float)) and not isinstance(price, bool):
        return format_money(float(price), currency)
    return str(price)
