"""Provider for administrator-designated cornerstone pages."""

from __future__ import annotations

from typing import Dict, List, Sequence

from critical_cache.core.urls import make_absolute_url, url_hash
from critical_cache.models.content import Post
from critical_cache.models.context import RequestContext
from critical_cache.services.content_source import ContentSource

from .interface import SourceGroups, key_group, owns_prefixed_key, storage_key


class CornerstoneProvider:
    """Each cornerstone page gets its own fragment, keyed by a hash of its URL."""

    name = "cornerstone"

    def __init__(self, content: ContentSource) -> None:
        self._content = content

    def owns_key(self, key: str) -> bool:
        return owns_prefixed_key(self.name, key)

    def current_storage_keys(self, context: RequestContext) -> List[str]:
        requested = make_absolute_url(context.url, self._content.home_url())
        group = url_hash(requested)
        if group in self._pages_by_hash():
            return [storage_key(self.name, group)]
        return []

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups:
        return {group: [url] for group, url in self._pages_by_hash().items()}

    def describe_key(self, key: str) -> str:
        url = self._pages_by_hash().get(key_group(self.name, key))
        return f"Cornerstone page: {url}" if url else "Cornerstone page"

    def success_ratio(self) -> float:
        return 1.0

    def _pages_by_hash(self) -> Dict[str, str]:
        home = self._content.home_url()
        pages: Dict[str, str] = {}
        for url in self._content.cornerstone_pages():
            pages.setdefault(url_hash(make_absolute_url(url, home)), url)
        return pages
