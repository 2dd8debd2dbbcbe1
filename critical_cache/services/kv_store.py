"""Key-value backends holding serialized critical CSS fragments."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable, Dict, Optional, Protocol, Tuple

import redis

from critical_cache.core.exceptions import BackingStoreUnavailable


class KeyValueStore(Protocol):
    """Minimal interface every fragment backend implements."""

    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes, ttl: Optional[int] = None) -> None: ...

    def delete(self, key: str) -> bool: ...


class InMemoryKeyValueStore:
    """Thread-safe dict with TTL expiry. Expired entries are dropped on read and swept on write."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._lock = Lock()
        self._clock = clock
        self._items: Dict[str, Tuple[bytes, Optional[float]]] = {}

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            value, expires_at = item
            if self._expired(expires_at, self._clock()):
                del self._items[key]
                return None
            return value

    def set(self, key: str, value: bytes, ttl: Optional[int] = None) -> None:
        now = self._clock()
        with self._lock:
            self._sweep(now)
            self._items[key] = (value, now + ttl if ttl else None)

    def delete(self, key: str) -> bool:
        with self._lock:
            item = self._items.pop(key, None)
            return item is not None and not self._expired(item[1], self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._items.items() if self._expired(expires_at, now)]
        for key in expired:
            del self._items[key]

    @staticmethod
    def _expired(expires_at: Optional[float], now: float) -> bool:
        return expires_at is not None and expires_at <= now


class RedisKeyValueStore:
    """Fragment backend on Redis. Connection errors surface as BackingStoreUnavailable."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = 2.0) -> "RedisKeyValueStore":
        client = redis.Redis.from_url(url, socket_connect_timeout=socket_timeout, socket_timeout=socket_timeout)
        return cls(client)

    def get(self, key: str) -> Optional[bytes]:
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis GET {key} failed: {exc}") from exc

    def set(self, key: str, value: bytes, ttl: Optional[int] = None) -> None:
        try:
            self._client.set(key, value, ex=ttl or None)
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis SET {key} failed: {exc}") from exc

    def delete(self, key: str) -> bool:
        try:
            return int(self._client.delete(key)) > 0
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis DEL {key} failed: {exc}") from exc
