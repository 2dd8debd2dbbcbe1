"""Critical CSS resolution for page views and the generation pipeline."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Sequence

from critical_cache.core.config import settings
from critical_cache.core.exceptions import NotFound, UnknownStorageKey
from critical_cache.core.logging import get_logger
from critical_cache.core.urls import make_absolute_url, normalize_cache_url, remove_query_arg
from critical_cache.models.content import Post
from critical_cache.models.context import RequestScope
from critical_cache.models.critical_css import FragmentRecord, SourceRecord
from critical_cache.providers import default_providers
from critical_cache.providers.interface import Provider

from .content_source import ContentSource, get_content_source
from .critical_css_store import CriticalCSSStore
from .kv_store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from .provider_registry import ProviderRegistry
from .source_resolver import SourceResolver, cache_bypass_filter

logger = get_logger(__name__)


class CriticalCSSService:
    """Entry point tying the provider chain to the fragment store."""

    def __init__(
        self,
        registry: ProviderRegistry,
        store: CriticalCSSStore,
        content: ContentSource,
        cache_bypass_param: str = "donotcachepage",
    ) -> None:
        self.registry = registry
        self.store = store
        self._content = content
        self._cache_bypass_param = cache_bypass_param
        self._resolver = SourceResolver(registry, content.home_url())

    def resolve_owner(self, key: str) -> Optional[Provider]:
        return self.registry.resolve_owner(key)

    def current_request_keys(self, scope: RequestScope) -> List[str]:
        return self.registry.current_request_keys(scope)

    def get_current_request_css(self, scope: RequestScope) -> Optional[str]:
        """Return the critical CSS for the scoped request, or ``None`` if none is stored.

        The lookup runs once per scope; later calls reuse its result.
        """

        if not scope.lookup_done:
            scope.fragment = self.store.get(self.current_request_keys(scope))
            scope.lookup_done = True
            if scope.fragment is None:
                logger.debug("critical_css_miss", url=scope.context.url)

        return scope.fragment.css if scope.fragment is not None else None

    def get_current_critical_css_key(self, scope: RequestScope) -> Optional[str]:
        self.get_current_request_css(scope)
        return scope.fragment.key if scope.fragment is not None else None

    def resolve_sources(self, context_post_ids: Sequence[int] = ()) -> List[SourceRecord]:
        return self._resolver.resolve_sources(self._context_posts(context_post_ids))

    def get_fragment(self, key: str) -> FragmentRecord:
        record = self.store.get([key])
        if record is None:
            raise NotFound(f"No fragment stored for {key}")
        return record

    def save_fragment(self, key: str, css: str) -> FragmentRecord:
        if self.registry.resolve_owner(key) is None:
            raise UnknownStorageKey(key)
        return self.store.set(key, css)

    def delete_fragment(self, key: str) -> None:
        self.store.delete(key)

    def invalidate_url(self, url: str, sources: Optional[Sequence[SourceRecord]] = None) -> List[str]:
        """Delete every fragment whose sources sample ``url``. Returns the deleted keys.

        URLs are compared whole, query included, ignoring only the cache
        bypass argument the URL filters append.
        """

        target = self._comparable_url(make_absolute_url(url, self._content.home_url()))
        if sources is None:
            sources = self.resolve_sources()

        keys = [
            source.key
            for source in sources
            if any(self._comparable_url(source_url) == target for source_url in source.urls)
        ]
        if keys:
            deleted = self.store.delete_many(keys)
            logger.info("critical_css_url_invalidated", url=url, keys=keys, deleted=deleted)
        return keys

    def _comparable_url(self, url: str) -> str:
        return normalize_cache_url(remove_query_arg(url, self._cache_bypass_param))

    def _context_posts(self, post_ids: Sequence[int]) -> List[Post]:
        posts: List[Post] = []
        for post_id in post_ids:
            post = self._content.get_post(post_id)
            if post is None:
                logger.info("context_post_not_found", post_id=post_id)
                continue
            posts.append(post)
        return posts


def build_fragment_backend() -> KeyValueStore:
    if settings.storage_backend == "redis":
        return RedisKeyValueStore.from_url(settings.redis_url, socket_timeout=settings.redis_socket_timeout_seconds)
    return InMemoryKeyValueStore()


@lru_cache
def get_provider_registry() -> ProviderRegistry:
    """Return the process-wide provider chain."""

    registry = ProviderRegistry(default_providers(get_content_source(), sample_size=settings.provider_sample_size))
    if settings.cache_bypass_secret:
        registry.add_url_filter(cache_bypass_filter(settings.cache_bypass_param, settings.cache_bypass_secret))
    return registry


@lru_cache
def get_critical_css_service() -> CriticalCSSService:
    """Return the process-wide critical CSS service."""

    store = CriticalCSSStore(
        build_fragment_backend(),
        ttl_seconds=settings.fragment_ttl_seconds,
        key_prefix=settings.fragment_key_prefix,
    )
    return CriticalCSSService(
        get_provider_registry(),
        store,
        get_content_source(),
        cache_bypass_param=settings.cache_bypass_param,
    )
