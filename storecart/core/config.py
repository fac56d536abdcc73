"""Environment-driven configuration for the cart widget."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from storecart.core.constants import (
    CATEGORIES_SEGMENT,
    CHECKOUT_DELAY_SECONDS,
    CONFIRMATION_PAGE,
    DEFAULT_CURRENCY,
    PLACEHOLDER_IMG,
)
from storecart.core.exceptions import ConfigurationException


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationException(f"{name} must not be negative")
    return value


def _get_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(slots=True)
class DisplayConfig:
    currency: str = DEFAULT_CURRENCY
    placeholder_img: str = PLACEHOLDER_IMG


@dataclass(slots=True)
class NavigationConfig:
    confirmation_page: str = CONFIRMATION_PAGE
    categories_segment: str = CATEGORIES_SEGMENT


@dataclass(slots=True)
class Settings:
    redis_url: str | None = None
    namespace: str = "storecart"
    short_term_ttl: int | None = None
    checkout_delay: float = CHECKOUT_DELAY_SECONDS
    log_level: str = "INFO"
    display: DisplayConfig = field(default_factory=DisplayConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    segment = os.getenv("STORECART_CATEGORIES_SEGMENT", CATEGORIES_SEGMENT).strip()
    if segment and not segment.startswith("/"):
        segment = "/" + segment
    if segment and not segment.endswith("/"):
        segment = segment + "/"

    return Settings(
        redis_url=os.getenv("REDIS_URL") or None,
        namespace=os.getenv("STORECART_NAMESPACE", "storecart"),
        short_term_ttl=_get_int("STORECART_SHORT_TERM_TTL", None),
        checkout_delay=_get_float("CHECKOUT_DELAY_SECONDS", CHECKOUT_DELAY_SECONDS),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        display=DisplayConfig(
            currency=os.getenv("STORECART_CURRENCY", DEFAULT_CURRENCY),
            placeholder_img=os.getenv("STORECART_PLACEHOLDER_IMG", PLACEHOLDER_IMG),
        ),
        navigation=NavigationConfig(
            confirmation_page=os.getenv("STORECART_CONFIRMATION_PAGE", CONFIRMATION_PAGE),
            categories_segment=segment.lower() or CATEGORIES_SEGMENT,
        ),
    )
