"""Cart line item model and normalization helpers."""
from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class LineItem(BaseModel):
    """One product row in a cart, identified by ``id``."""

    id: str = Field(..., min_length=1, description="Stable product identity")
    title: str = Field("", description="Display title")
    price: Union[str, float] = Field("", description="Display string or numeric price")
    img: str = Field("", description="Image URL")
    desc: str = Field("", description="Short description")
    qty: int = Field(1, ge=0, description="Quantity")

    class Config:
        """Pydantic config."""

        extra = "allow"

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "img", "desc", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return ""
        return v

    @field_validator("qty", mode="before")
    @classmethod
    def coerce_qty(cls, v: Any) -> int:
        if v is None or v == "":
            return 1
        try:
            qty = int(v)
        except (TypeError, ValueError):
            return 1
        return max(0, qty)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


def parse_item(raw: Any) -> LineItem | None:
    """Build a line item from stored data; ``None`` when it has no usable id."""
    if isinstance(raw, LineItem):
        return raw.model_copy()
    if not isinstance(raw, dict):
        return None
    try:
        return LineItem.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Dropping unreadable cart item %r: %s", raw.get("id"), exc)
        return None


def parse_cart(raw: Any) -> list[LineItem]:
    """Decode a stored cart, dropping rows that are not line items."""
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Stored cart is not a list (%s); using empty cart", type(raw).__name__)
        return []
    items = [parse_item(entry) for entry in raw]
    return [item for item in items if item is not None]


def normalize_cart(items: list[LineItem]) -> list[LineItem]:
    """Collapse duplicate ids (first position wins) and drop zero quantities."""
    merged: dict[str, LineItem] = {}
    for item in items:
        existing = merged.get(item.id)
        if existing is None:
            merged[item.id] = item.model_copy()
        else:
            existing.qty += item.qty
    return [item for item in merged.values() if item.qty > 0]


def dump_cart(items: list[LineItem]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]
