"""Aggregate the URLs each provider group needs sampled to generate its fragment."""

from __future__ import annotations

from typing import List, Sequence, Set

from critical_cache.core.logging import get_logger
from critical_cache.core.urls import add_query_arg, make_absolute_urls
from critical_cache.models.content import Post
from critical_cache.models.critical_css import SourceRecord
from critical_cache.providers import STRUCTURAL_PROVIDERS
from critical_cache.providers.interface import storage_key

from .provider_registry import ProviderRegistry, UrlFilter

logger = get_logger(__name__)


class SourceResolver:
    """Builds the ordered list of source records consumed by the generation pipeline.

    URLs claimed by a structural provider (core pages, cornerstone pages) are
    reserved: they are removed from every other provider's groups so one URL
    never feeds two fragments.
    """

    def __init__(self, registry: ProviderRegistry, base_url: str) -> None:
        self._registry = registry
        self._base_url = base_url

    def resolve_sources(self, context_posts: Sequence[Post] = ()) -> List[SourceRecord]:
        reserved = self._reserved_urls(context_posts)
        sources: List[SourceRecord] = []

        for provider in self._registry.providers:
            structural = provider.name in STRUCTURAL_PROVIDERS
            for group, urls in provider.critical_source_urls(context_posts).items():
                absolute = make_absolute_urls(urls, self._base_url)
                if not structural:
                    absolute = [url for url in absolute if url not in reserved]
                if not absolute:
                    continue

                key = storage_key(provider.name, group)
                sources.append(
                    SourceRecord(
                        key=key,
                        label=provider.describe_key(key),
                        urls=self._registry.apply_url_filters(absolute, provider.name),
                        success_ratio=provider.success_ratio(),
                    )
                )

        logger.debug("critical_css_sources_resolved", groups=len(sources), reserved=len(reserved))
        return self._registry.apply_sources_filters(sources)

    def _reserved_urls(self, context_posts: Sequence[Post]) -> Set[str]:
        reserved: Set[str] = set()
        for name in STRUCTURAL_PROVIDERS:
            for urls in self._registry.provider(name).critical_source_urls(context_posts).values():
                reserved.update(make_absolute_urls(urls, self._base_url))
        return reserved


def cache_bypass_filter(param: str, secret: str) -> UrlFilter:
    """URL filter appending a page-cache bypass argument so sampled pages render fresh."""

    def _filter(urls: List[str], provider_name: str) -> List[str]:
        return [add_query_arg(url, param, secret) for url in urls]

    return _filter

