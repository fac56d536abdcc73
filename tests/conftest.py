"""Shared pytest fixtures: in-memory storage shared like browser tabs."""
from __future__ import annotations

import json
from collections.abc import Callable

import pytest

from storecart.application.widget import CartWidget
from storecart.core.config import Settings
from storecart.core.constants import SESSION_KEY
from storecart.core.events import StorageEventChannel
from storecart.domain.value_objects import Scope
from storecart.integrations.storage import MemoryBackend, PersistentStore


@pytest.fixture()
def long_term() -> MemoryBackend:
    """Origin-wide storage shared by every tab in a test."""
    return MemoryBackend()


@pytest.fixture()
def channel() -> StorageEventChannel:
    return StorageEventChannel()


@pytest.fixture()
def store(long_term: MemoryBackend, channel: StorageEventChannel) -> PersistentStore:
    return PersistentStore(long_term, MemoryBackend(), channel=channel, origin="tab-1")


@pytest.fixture()
def host_store(long_term: MemoryBackend, channel: StorageEventChannel) -> PersistentStore:
    """The host site's login page, writing the session record."""
    return PersistentStore(long_term, MemoryBackend(), channel=channel, origin="host")


@pytest.fixture()
def settings() -> Settings:
    return Settings(checkout_delay=0)


@pytest.fixture()
def make_widget(
    long_term: MemoryBackend, channel: StorageEventChannel, settings: Settings
) -> Callable[..., CartWidget]:
    counter = {"n": 0}

    def _make(current_url: str = "https://shop.test/index.html", **overrides) -> CartWidget:
        counter["n"] += 1
        store = PersistentStore(
            long_term, MemoryBackend(), channel=channel, origin=f"tab-{counter['n']}"
        )
        widget_settings = Settings(**{**_settings_kwargs(settings), **overrides})
        widget = CartWidget(store, widget_settings, current_url=current_url)
        widget.start()
        return widget

    return _make


def _settings_kwargs(settings: Settings) -> dict:
    return {
        "redis_url": settings.redis_url,
        "namespace": settings.namespace,
        "checkout_delay": settings.checkout_delay,
        "display": settings.display,
        "navigation": settings.navigation,
    }


@pytest.fixture()
def login(host_store: PersistentStore) -> Callable[..., None]:
    def _login(user_id: str | None, name: str = "Ana", email: str = "ana@example.com") -> None:
        if user_id is None:
            host_store.remove(Scope.LONG_TERM, SESSION_KEY)
        else:
            host_store.set(Scope.LONG_TERM, SESSION_KEY, {"id": user_id, "name": name, "email": email})

    return _login


@pytest.fixture()
def stored(long_term: MemoryBackend) -> Callable[[str], object]:
    """Decoded long-term value, read straight from the backend."""

    def _read(key: str):
        raw = long_term.get_item(key)
        return None if raw is None else json.loads(raw)

    return _read
