"""Redis-backed storage scope."""
from __future__ import annotations

import importlib.util
import logging
from typing import Any, Iterator

from storecart.core.exceptions import StorageUnavailable
from storecart.integrations.storage import MemoryBackend

logger = logging.getLogger(__name__)

REDIS_AVAILABLE: bool = importlib.util.find_spec("redis") is not None

if REDIS_AVAILABLE:
    import redis as redis  # type: ignore


class RedisBackend:
    """Storage scope persisted in Redis, shared by every widget on the origin.

    Keys are namespaced so several sites can share one Redis database.
    Without a Redis URL (or without the redis package) the backend keeps its
    data in a process-local dict. Once a URL is configured the backend never
    answers from memory: a failed command raises ``StorageUnavailable`` and
    the connection is retried on the next call.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        *,
        namespace: str = "storecart",
        ttl_seconds: int | None = None,
        client: Any = None,
    ) -> None:
        self._redis_url = redis_url
        self._namespace = namespace.rstrip(":")
        self._ttl = ttl_seconds
        self._memory: MemoryBackend | None = None
        if client is not None:
            self._client = client
        elif self._redis_configured():
            self._client = self._init_client()
        else:
            self._client = None
            self._memory = MemoryBackend()

    @property
    def is_fallback(self) -> bool:
        """True when running without Redis at all."""
        return self._memory is not None

    def _redis_configured(self) -> bool:
        if not REDIS_AVAILABLE:
            logger.warning("redis package is unavailable; storage uses in-memory fallback")
            return False
        if not self._redis_url:
            logger.warning("REDIS_URL is not set; storage uses in-memory fallback")
            return False
        return True

    def _init_client(self) -> Any:
        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            logger.info("Redis storage enabled (namespace=%s)", self._namespace)
            return client
        except Exception as exc:
            logger.warning("Redis storage init failed, will retry on next call: %s", exc)
            return None

    def _connected(self) -> Any:
        if self._client is None:
            self._client = self._init_client()
        if self._client is None:
            raise StorageUnavailable("Redis storage is unreachable")
        return self._client

    def _unavailable(self, operation: str, key: str, exc: Exception) -> StorageUnavailable:
        logger.warning("Redis %s failed for %s: %s", operation, key, exc)
        return StorageUnavailable(f"Redis {operation} failed for {key!r}: {exc}")

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get_item(self, key: str) -> str | None:
        if self._memory is not None:
            return self._memory.get_item(key)
        client = self._connected()
        try:
            value = client.get(self._key(key))
        except Exception as exc:
            raise self._unavailable("get", key, exc) from exc
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set_item(self, key: str, value: str) -> None:
        if self._memory is not None:
            self._memory.set_item(key, value)
            return
        client = self._connected()
        try:
            if self._ttl:
                client.setex(self._key(key), self._ttl, value)
            else:
                client.set(self._key(key), value)
        except Exception as exc:
            raise self._unavailable("set", key, exc) from exc

    def remove_item(self, key: str) -> None:
        if self._memory is not None:
            self._memory.remove_item(key)
            return
        client = self._connected()
        try:
            client.delete(self._key(key))
        except Exception as exc:
            raise self._unavailable("delete", key, exc) from exc

    def keys(self) -> Iterator[str]:
        if self._memory is not None:
            return self._memory.keys()
        client = self._connected()
        prefix = self._key("")
        try:
            found = list(client.scan_iter(match=prefix + "*"))
        except Exception as exc:
            raise self._unavailable("scan", prefix, exc) from exc
        return iter(
            (k.decode("utf-8") if isinstance(k, bytes) else k)[len(prefix):] for k in found
        )
