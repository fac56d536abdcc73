"""Custom exceptions for storecart."""
from __future__ import annotations


class StoreCartException(Exception):
    """Base exception for all storecart errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class StorageException(StoreCartException):
    """Key/value storage errors."""

    pass


class StorageUnavailable(StorageException):
    """Storage backend is disabled or unreachable."""

    pass


class StorageQuotaExceeded(StorageException):
    """Write rejected because the backend is full."""

    def __init__(self, key: str, size: int, quota: int) -> None:
        super().__init__(f"Quota exceeded writing {key!r} ({size} > {quota} bytes)")
        self.key = key
        self.size = size
        self.quota = quota


class StorageCorrupt(StorageException):
    """Stored text could not be decoded."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Stored value for {key!r} is not valid JSON")
        self.key = key


class ValidationException(StoreCartException):
    """Checkout form validation errors."""

    def __init__(self, field: str, message: str, error_key: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.error_key = error_key or f"{field}_invalid"


class EmptyCartException(ValidationException):
    """Cart became empty before the checkout was submitted."""

    def __init__(self, message: str) -> None:
        super().__init__("cart", message, "cart_empty")


class LedgerWriteError(StoreCartException):
    """Order could not be persisted to the ledger."""

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Failed to persist order {order_id}")
        self.order_id = order_id


class CheckoutStateError(StoreCartException):
    """Illegal checkout state transition."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Transition '{current} -> {target}' is not allowed")
        self.current = current
        self.target = target


class ConfigurationException(StoreCartException):
    """Configuration errors."""

    pass
