"""Key/value storage port with JSON (de)serialization and failure containment."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Protocol

from storecart.core.events import StorageEvent, StorageEventChannel
from storecart.core.exceptions import (
    StorageCorrupt,
    StorageQuotaExceeded,
    StorageUnavailable,
)
from storecart.domain.value_objects import Scope

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Subset of the browser Storage API the widget relies on."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> Iterator[str]: ...


class MemoryBackend:
    """Process-local storage scope.

    ``quota_bytes`` and ``disabled`` reproduce the failure modes of browser
    storage (full quota, storage turned off by the user).
    """

    def __init__(self, quota_bytes: int | None = None, disabled: bool = False) -> None:
        self._data: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.disabled = disabled

    def _check_enabled(self) -> None:
        if self.disabled:
            raise StorageUnavailable("Storage is disabled")

    def _used_bytes(self, skip: str | None = None) -> int:
        return sum(
            len(k.encode("utf-8")) + len(v.encode("utf-8"))
            for k, v in self._data.items()
            if k != skip
        )

    def get_item(self, key: str) -> str | None:
        self._check_enabled()
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_enabled()
        if self.quota_bytes is not None:
            size = self._used_bytes(skip=key) + len(key.encode("utf-8")) + len(value.encode("utf-8"))
            if size > self.quota_bytes:
                raise StorageQuotaExceeded(key, size, self.quota_bytes)
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._check_enabled()
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        self._check_enabled()
        return iter(list(self._data))

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class PersistentStore:
    """Two storage scopes behind one JSON get/set/remove contract.

    Reads never raise: missing or malformed values come back as ``None``.
    Writes never raise either; they return ``False`` when the backend
    rejected them so callers can decide whether that matters. Successful
    long-term writes are announced on the event channel, tagged with
    ``origin`` so the writer does not hear its own changes.
    """

    def __init__(
        self,
        long_term: StorageBackend,
        short_term: StorageBackend | None = None,
        *,
        channel: StorageEventChannel | None = None,
        origin: str | None = None,
    ) -> None:
        self._backends: dict[Scope, StorageBackend] = {
            Scope.LONG_TERM: long_term,
            Scope.SHORT_TERM: short_term if short_term is not None else MemoryBackend(),
        }
        self.channel = channel
        self.origin = origin

    def backend(self, scope: Scope) -> StorageBackend:
        return self._backends[Scope(scope)]

    def raw_get(self, scope: Scope, key: str) -> str | None:
        try:
            return self.backend(scope).get_item(key)
        except Exception as exc:
            logger.warning("Storage read failed (%s, %s): %s", Scope(scope).value, key, exc)
            return None

    def get(self, scope: Scope, key: str) -> Any:
        raw = self.raw_get(scope, key)
        if raw is None or raw == "":
            return None
        try:
            return self._decode(key, raw)
        except StorageCorrupt as exc:
            logger.error("%s", exc.message)
            return None

    @staticmethod
    def _decode(key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise StorageCorrupt(key) from exc

    def set(self, scope: Scope, key: str, value: Any) -> bool:
        try:
            serialized = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.error("Cannot serialize value for %s: %s", key, exc)
            return False

        old_value = self.raw_get(scope, key) if self._announces(scope) else None
        try:
            self.backend(scope).set_item(key, serialized)
        except Exception as exc:
            logger.error("Storage write failed (%s, %s): %s", Scope(scope).value, key, exc)
            return False

        self._announce(scope, key, old_value, serialized)
        return True

    def remove(self, scope: Scope, key: str) -> bool:
        old_value = self.raw_get(scope, key) if self._announces(scope) else None
        try:
            self.backend(scope).remove_item(key)
        except Exception as exc:
            logger.error("Storage remove failed (%s, %s): %s", Scope(scope).value, key, exc)
            return False

        if old_value is not None:
            self._announce(scope, key, old_value, None)
        return True

    def keys(self, scope: Scope, prefix: str = "") -> list[str]:
        try:
            return [key for key in self.backend(scope).keys() if key.startswith(prefix)]
        except Exception as exc:
            logger.warning("Storage key listing failed (%s): %s", Scope(scope).value, exc)
            return []

    def _announces(self, scope: Scope) -> bool:
        return self.channel is not None and Scope(scope) is Scope.LONG_TERM

    def _announce(self, scope: Scope, key: str, old: str | None, new: str | None) -> None:
        if self.channel is None or Scope(scope) is not Scope.LONG_TERM or old == new:
            return
        self.channel.publish(StorageEvent(key=key, old_value=old, new_value=new, origin=self.origin))
