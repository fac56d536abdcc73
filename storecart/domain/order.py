"""Order domain types created by a successful checkout."""
from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from storecart.core.constants import MASKED_PAN_PREFIX, PAYMENT_METHOD_CARD
from storecart.domain.cart import LineItem
from storecart.domain.value_objects import CardBrand


class CustomerInfo(BaseModel):
    name: str
    email: str
    address: str
    phone: str = ""
    notes: str = ""

    class Config:
        """Pydantic config."""

        frozen = True


class PaymentInfo(BaseModel):
    """Card data safe to persist: only brand and last four digits."""

    method: str = PAYMENT_METHOD_CARD
    masked: str
    brand: str
    last4: str = Field(..., pattern=r"^\d{4}$")

    class Config:
        """Pydantic config."""

        frozen = True

    @classmethod
    def from_card_number(cls, digits: str) -> "PaymentInfo":
        last4 = digits[-4:]
        return cls(
            method=PAYMENT_METHOD_CARD,
            masked=MASKED_PAN_PREFIX + last4,
            brand=CardBrand.detect(digits).value,
            last4=last4,
        )


class Order(BaseModel):
    """Immutable record of one committed checkout."""

    id: str
    user_id: Optional[str] = Field(None, alias="userId")
    customer: CustomerInfo
    payment: PaymentInfo
    items: tuple[LineItem, ...]
    total: float
    created_at: str = Field(..., alias="createdAt")

    class Config:
        """Pydantic config."""

        frozen = True
        populate_by_name = True

    def to_record(self) -> dict:
        """JSON shape read by the confirmation page (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


def new_order_id(now: float | None = None) -> str:
    """``order_<epoch millis>_<suffix>``; the suffix separates same-millisecond orders."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"order_{millis}_{secrets.token_hex(3)}"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
