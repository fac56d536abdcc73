"""Domain package."""

from .cart import LineItem, dump_cart, normalize_cart, parse_cart
from .order import CustomerInfo, Order, PaymentInfo
from .session import Session, session_id
from .value_objects import CardBrand, CheckoutState, Scope

__all__ = [
    # Entities
    "LineItem",
    "Session",
    "Order",
    "CustomerInfo",
    "PaymentInfo",
    # Value Objects
    "Scope",
    "CheckoutState",
    "CardBrand",
    # Helpers
    "parse_cart",
    "dump_cart",
    "normalize_cart",
    "session_id",
]
