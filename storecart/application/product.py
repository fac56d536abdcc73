"""Build cart records from the product-detail modal's fields."""
from __future__ import annotations

from typing import Any

from storecart.application.checkout.navigation import encode_component
from storecart.core.constants import DEFAULT_PRODUCT_TITLE


def product_item_from_record(
    title: str | None,
    img: str | None = None,
    price: Any = "",
    desc: str | None = None,
) -> dict[str, Any]:
    """Item record as the product modal hands it to ``add_to_cart``.

    The id is derived from title and image so the same product card always
    maps onto the same cart row.
    """
    title = (title or "").strip()
    img = img or ""
    return {
        "id": encode_component(f"{title or DEFAULT_PRODUCT_TITLE.lower()}|{img}"),
        "title": title or DEFAULT_PRODUCT_TITLE,
        "price": price if price is not None else "",
        "img": img,
        "desc": desc or "",
        "qty": 1,
    }
