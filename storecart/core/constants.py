"""Storage keys and default values shared across the widget.

Keys are part of the persisted layout: changing them orphans existing carts.
"""

# ============== STORAGE KEYS ==============
GUEST_CART_KEY = "cart:guest"
USER_CART_PREFIX = "cart:user:"
CART_KEY_PREFIX = "cart:"
ORDERS_KEY = "orders:all"
LAST_ORDER_KEY = "orders:last"  # short-term scope
LAST_ORDER_FALLBACK_KEY = "orders:last_tmp"  # long-term, best effort
SESSION_KEY = "session:current"
SKIP_PREFILL_KEY = "checkout:skip-prefill"  # short-term scope

# ============== CHECKOUT ==============
CHECKOUT_DELAY_SECONDS = 0.9
CARD_MIN_DIGITS = 12
CARD_MAX_DIGITS = 19
MASKED_PAN_PREFIX = "**** **** **** "
PAYMENT_METHOD_CARD = "card"

# ============== DISPLAY ==============
DEFAULT_CURRENCY = "$"
PLACEHOLDER_IMG = "img/placeholder.png"
EMPTY_CART_MESSAGE = "El carrito está vacío."
DEFAULT_PRODUCT_TITLE = "Producto"

# ============== NAVIGATION ==============
CONFIRMATION_PAGE = "checkout.html"
CATEGORIES_SEGMENT = "/categorias/"
HIDDEN_CART_MARKERS = ("registro", "register")
