"""Wiring of storage, event channel and widget from configuration."""
from __future__ import annotations

import logging
import uuid
from typing import Any

from storecart.application.widget import CartWidget
from storecart.core.config import Settings, load_settings
from storecart.core.events import StorageEventChannel
from storecart.core.logging_setup import configure_logging
from storecart.integrations.redis_storage import RedisBackend
from storecart.integrations.storage import MemoryBackend, PersistentStore, StorageBackend

logger = logging.getLogger(__name__)


def build_long_term_backend(settings: Settings) -> StorageBackend:
    """Shared scope: Redis when configured, process memory otherwise."""
    if settings.redis_url:
        backend = RedisBackend(settings.redis_url, namespace=settings.namespace)
        if not backend.is_fallback:
            logger.info("Using Redis for long-term cart storage")
        return backend
    logger.info("Using in-memory long-term storage (carts are lost on restart)")
    return MemoryBackend()


def build_store(
    settings: Settings,
    channel: StorageEventChannel | None = None,
    *,
    long_term: Any = None,
    origin: str | None = None,
) -> PersistentStore:
    """Create the adapter for one widget instance.

    ``long_term`` is shared between widgets; pass the same backend to every
    instance that should see the same carts. The short-term scope is always
    private to the instance.
    """
    origin = origin or uuid.uuid4().hex
    if long_term is None:
        long_term = build_long_term_backend(settings)
    short_term: StorageBackend = MemoryBackend()
    if settings.redis_url and settings.short_term_ttl:
        short_term = RedisBackend(
            settings.redis_url,
            namespace=f"{settings.namespace}:tab:{origin}",
            ttl_seconds=settings.short_term_ttl,
        )
    return PersistentStore(long_term, short_term, channel=channel, origin=origin)


def build_widget(
    settings: Settings | None = None,
    *,
    long_term: Any = None,
    channel: StorageEventChannel | None = None,
    current_url: str = "",
    start: bool = True,
) -> CartWidget:
    """Create a started widget; share ``long_term`` and ``channel`` across tabs."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    store = build_store(settings, channel, long_term=long_term)
    widget = CartWidget(store, settings, current_url=current_url)
    if start:
        widget.start()
    return widget
