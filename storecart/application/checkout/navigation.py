"""Where the browser goes after a committed checkout."""
from __future__ import annotations

from urllib.parse import quote, urljoin, urlsplit

from storecart.core.config import NavigationConfig
from storecart.core.constants import HIDDEN_CART_MARKERS

# characters encodeURIComponent leaves alone besides the RFC 3986 unreserved set
_URI_COMPONENT_SAFE = "!~*'()"


def encode_component(value: str) -> str:
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def confirmation_url(
    current_url: str,
    order_id: str,
    navigation: NavigationConfig | None = None,
) -> str:
    """Resolve the confirmation page next to the current page.

    Pages inside the categories folder live one level below the site root,
    so the confirmation page is looked up one directory up for them.

    Example:
        >>> confirmation_url("https://shop.test/categorias/ropa.html?x=1", "order_1")
        'https://shop.test/checkout.html?order=order_1'
    """
    navigation = navigation or NavigationConfig()
    query = f"?order={encode_component(order_id)}"
    href = (current_url or "").split("#", 1)[0].split("?", 1)[0].replace("\\", "/")
    if not href:
        return navigation.confirmation_page + query

    path = urlsplit(href).path.lower()
    if navigation.categories_segment and navigation.categories_segment in path:
        target = "../" + navigation.confirmation_page
    else:
        target = navigation.confirmation_page
    return urljoin(href, target) + query


def should_show_floating_cart(path: str, fragment: str = "") -> bool:
    """The floating cart button is hidden on registration pages."""
    path = (path or "").lower()
    fragment = (fragment or "").lower()
    return not any(marker in path or marker in fragment for marker in HIDDEN_CART_MARKERS)
