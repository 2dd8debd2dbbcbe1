"""Page cache backends keyed by normalized absolute URL."""

from __future__ import annotations

from threading import Lock
from typing import Callable, Dict, List, Optional, Protocol

import redis

from critical_cache.core.exceptions import BackingStoreUnavailable
from critical_cache.core.urls import is_derived_url, is_paginated_variant, match_prefix, normalize_cache_url


class PageCacheStore(Protocol):
    """Operations the invalidator issues against the page cache."""

    def put(self, url: str, body: bytes) -> None: ...

    def get(self, url: str) -> Optional[bytes]: ...

    def keys(self, prefix: str = "") -> List[str]: ...

    def delete(self, url: str) -> int: ...

    def delete_page(self, url: str) -> int: ...

    def delete_recursive(self, url: str) -> int: ...


class InMemoryPageCache:
    """Thread-safe page cache. Each delete removes whole entries under the lock."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: Dict[str, bytes] = {}

    def put(self, url: str, body: bytes) -> None:
        with self._lock:
            self._entries[normalize_cache_url(url)] = body

    def get(self, url: str) -> Optional[bytes]:
        with self._lock:
            return self._entries.get(normalize_cache_url(url))

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(key for key in self._entries if key.startswith(prefix))

    def delete(self, url: str) -> int:
        with self._lock:
            return 1 if self._entries.pop(normalize_cache_url(url), None) is not None else 0

    def delete_page(self, url: str) -> int:
        return self._delete_matching(normalize_cache_url(url), is_paginated_variant)

    def delete_recursive(self, url: str) -> int:
        return self._delete_matching(normalize_cache_url(url), is_derived_url)

    def _delete_matching(self, url: str, matches: Callable[[str, str], bool]) -> int:
        with self._lock:
            doomed = [key for key in self._entries if matches(key, url)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)


class RedisPageCache:
    """Page cache on Redis, one string key per URL under a common prefix."""

    def __init__(self, client: redis.Redis, key_prefix: str = "page_cache:") -> None:
        self._client = client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "page_cache:", socket_timeout: float = 2.0) -> "RedisPageCache":
        client = redis.Redis.from_url(url, socket_connect_timeout=socket_timeout, socket_timeout=socket_timeout)
        return cls(client, key_prefix=key_prefix)

    def put(self, url: str, body: bytes) -> None:
        try:
            self._client.set(self._key(url), body)
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis SET for {url} failed: {exc}") from exc

    def get(self, url: str) -> Optional[bytes]:
        try:
            return self._client.get(self._key(url))
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis GET for {url} failed: {exc}") from exc

    def keys(self, prefix: str = "") -> List[str]:
        pattern = f"{self._key_prefix}{_escape_glob(prefix)}*"
        try:
            raw_keys = list(self._client.scan_iter(match=pattern))
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis SCAN {pattern} failed: {exc}") from exc
        urls = [key.decode("utf-8") if isinstance(key, bytes) else key for key in raw_keys]
        return sorted(url[len(self._key_prefix) :] for url in urls)

    def delete(self, url: str) -> int:
        try:
            return int(self._client.delete(self._key(url)))
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis DEL for {url} failed: {exc}") from exc

    def delete_page(self, url: str) -> int:
        return self._delete_matching(normalize_cache_url(url), is_paginated_variant)

    def delete_recursive(self, url: str) -> int:
        return self._delete_matching(normalize_cache_url(url), is_derived_url)

    def _delete_matching(self, url: str, matches: Callable[[str, str], bool]) -> int:
        base = match_prefix(url)
        doomed = [key for key in self.keys(base) if matches(key, url)]
        if not doomed:
            return 0
        try:
            return int(self._client.delete(*(f"{self._key_prefix}{key}" for key in doomed)))
        except redis.RedisError as exc:
            raise BackingStoreUnavailable(f"Redis DEL under {url} failed: {exc}") from exc

    def _key(self, url: str) -> str:
        return f"{self._key_prefix}{normalize_cache_url(url)}"


def _escape_glob(value: str) -> str:
    for char in "\\*?[]":
        value = value.replace(char, f"\\{char}")
    return value
