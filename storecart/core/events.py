"""
Storage change notifications shared between widget instances.

Handles:
- Subscriptions filtered by exact key or key prefix
- Delivery of writes to every subscriber except the writer
- Isolation of failing listeners
"""
from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StorageEvent:
    """A completed write on the shared long-term scope."""

    key: str
    old_value: str | None
    new_value: str | None
    origin: str | None = None

    @property
    def removed(self) -> bool:
        return self.new_value is None


Listener = Callable[[StorageEvent], Any]


@dataclass(slots=True)
class Subscription:
    subscription_id: int
    owner: str | None
    listener: Listener
    key: str | None = None
    prefix: str | None = None

    def matches(self, event: StorageEvent) -> bool:
        if self.owner is not None and event.origin == self.owner:
            return False
        if self.key is not None and event.key != self.key:
            return False
        if self.prefix is not None and not event.key.startswith(self.prefix):
            return False
        return True


class StorageEventChannel:
    """Publish/subscribe channel standing in for cross-tab storage events."""

    def __init__(self) -> None:
        self._subscriptions: dict[int, Subscription] = {}
        self._ids = itertools.count(1)

    def subscribe(
        self,
        listener: Listener,
        *,
        owner: str | None = None,
        key: str | None = None,
        prefix: str | None = None,
    ) -> Subscription:
        """Register a listener for one key, a key prefix, or every key."""
        subscription = Subscription(
            subscription_id=next(self._ids),
            owner=owner,
            listener=listener,
            key=key,
            prefix=prefix,
        )
        self._subscriptions[subscription.subscription_id] = subscription
        logger.debug(
            "Storage listener subscribed: owner=%s key=%s prefix=%s", owner, key, prefix
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscriptions.pop(subscription.subscription_id, None)

    def unsubscribe_owner(self, owner: str) -> int:
        stale = [sid for sid, sub in self._subscriptions.items() if sub.owner == owner]
        for sid in stale:
            del self._subscriptions[sid]
        return len(stale)

    def publish(self, event: StorageEvent) -> int:
        """Deliver an event; returns how many listeners received it."""
        delivered = 0
        for subscription in list(self._subscriptions.values()):
            if subscription.subscription_id not in self._subscriptions:
                continue
            if not subscription.matches(event):
                continue
            try:
                subscription.listener(event)
                delivered += 1
            except Exception as exc:
                logger.error(
                    "Storage listener %s failed for key %s: %s",
                    subscription.subscription_id,
                    event.key,
                    exc,
                )
        return delivered

    def __len__(self) -> int:
        return len(self._subscriptions)
