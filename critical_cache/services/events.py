"""Content-change event hooks wired to the page cache invalidator."""

from __future__ import annotations

from functools import lru_cache

from critical_cache.core.config import settings
from critical_cache.core.logging import get_logger

from .content_source import get_content_source
from .page_cache_invalidator import PageCacheInvalidator
from .page_cache_store import InMemoryPageCache, PageCacheStore, RedisPageCache

logger = get_logger(__name__)


class CacheEvents:
    """Named hooks the host fires when content changes."""

    def __init__(self, invalidator: PageCacheInvalidator) -> None:
        self._invalidator = invalidator

    def on_content_changed_everywhere(self) -> int:
        return self._invalidator.purge_all()

    def on_home_changed(self) -> int:
        return self._invalidator.purge_home()

    def on_url_changed(self, url: str) -> int:
        return self._invalidator.purge_url(url)

    def on_post_changed(self, post_id: int) -> int:
        return self._invalidator.purge_post(post_id)

    def on_page_output_changed(self) -> int:
        """Cached pages embed the old critical CSS once a fragment changes."""

        logger.info("page_output_changed")
        return self._invalidator.purge_all()


@lru_cache
def get_page_cache_store() -> PageCacheStore:
    """Return the configured page cache backend."""

    if settings.page_cache_backend == "redis":
        return RedisPageCache.from_url(
            settings.redis_url,
            key_prefix=settings.page_cache_key_prefix,
            socket_timeout=settings.redis_socket_timeout_seconds,
        )
    return InMemoryPageCache()


@lru_cache
def get_cache_events() -> CacheEvents:
    """Return the process-wide event hooks."""

    return CacheEvents(PageCacheInvalidator(get_page_cache_store(), get_content_source()))
