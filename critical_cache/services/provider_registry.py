"""Ordered provider chain and its extension points."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from critical_cache.core.exceptions import InvalidContext
from critical_cache.core.logging import get_logger
from critical_cache.models.context import RequestScope
from critical_cache.models.critical_css import SourceRecord
from critical_cache.providers.interface import Provider

logger = get_logger(__name__)

UrlFilter = Callable[[List[str], str], List[str]]
SourcesFilter = Callable[[List[SourceRecord]], List[SourceRecord]]


class ProviderRegistry:
    """Fixed, ordered list of providers.

    The order is set at construction and never changes: key resolution and
    fragment lookups stop at the first match.
    """

    def __init__(self, providers: Sequence[Provider]) -> None:
        names = [provider.name for provider in providers]
        if len(set(names)) != len(names):
            raise ValueError(f"Provider names must be unique, got {names}")

        self._providers: Tuple[Provider, ...] = tuple(providers)
        self._url_filters: List[UrlFilter] = []
        self._sources_filters: List[SourcesFilter] = []

    @property
    def providers(self) -> Tuple[Provider, ...]:
        return self._providers

    def provider(self, name: str) -> Provider:
        for provider in self._providers:
            if provider.name == name:
                return provider
        raise KeyError(f"Provider {name} not registered")

    def resolve_owner(self, key: str) -> Optional[Provider]:
        """Return the first provider that owns ``key``."""

        for provider in self._providers:
            if provider.owns_key(key):
                return provider
        return None

    def current_request_keys(self, scope: RequestScope) -> List[str]:
        """Return every storage key applicable to the scoped request, in precedence order."""

        if scope.keys is not None:
            return list(scope.keys)

        keys: List[str] = []
        for provider in self._providers:
            try:
                provider_keys = provider.current_storage_keys(scope.context)
            except InvalidContext as exc:
                logger.debug("provider_context_unresolved", provider=provider.name, reason=str(exc))
                continue
            keys.extend(provider_keys)

        if not keys:
            logger.debug("no_storage_keys_for_request", url=scope.context.url, kind=scope.context.kind.value)

        scope.keys = keys
        return list(keys)

    def add_url_filter(self, callback: UrlFilter) -> None:
        """Register a transform applied to each resolved source group's URLs."""

        self._url_filters.append(callback)

    def add_sources_filter(self, callback: SourcesFilter) -> None:
        """Register a transform applied to the full list of source records."""

        self._sources_filters.append(callback)

    def apply_url_filters(self, urls: List[str], provider_name: str) -> List[str]:
        for callback in self._url_filters:
            urls = callback(urls, provider_name)
        return urls

    def apply_sources_filters(self, sources: List[SourceRecord]) -> List[SourceRecord]:
        for callback in self._sources_filters:
            sources = callback(sources)
        return sources
