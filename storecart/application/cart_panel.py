"""Pure projection of a cart into the panel view-model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from storecart.core.config import DisplayConfig
from storecart.core.constants import EMPTY_CART_MESSAGE
from storecart.core.pricing import calc_cart_count, calc_cart_total, format_money, format_price
from storecart.domain.cart import LineItem


@dataclass(frozen=True, slots=True)
class PanelRow:
    id: str
    title: str
    img: str
    price_display: str
    qty: int


@dataclass(frozen=True, slots=True)
class PanelView:
    count: int
    total_display: str
    rows: tuple[PanelRow, ...] = field(default_factory=tuple)
    empty: bool = True
    empty_message: str | None = EMPTY_CART_MESSAGE


def project(items: Iterable[LineItem], display: DisplayConfig | None = None) -> PanelView:
    display = display or DisplayConfig()
    items = list(items)
    rows = tuple(
        PanelRow(
            id=item.id,
            title=item.title,
            img=item.img or display.placeholder_img,
            price_display=format_price(item.price, display.currency),
            qty=item.qty,
        )
        for item in items
    )
    return PanelView(
        count=calc_cart_count(items),
        total_display=format_money(calc_cart_total(items), display.currency),
        rows=rows,
        empty=not rows,
        empty_message=None if rows else EMPTY_CART_MESSAGE,
    )


def badge_count(items: Iterable[LineItem]) -> int:
    """Number shown on the nav and floating cart badges."""
    return calc_cart_count(items)
