"""Provider for taxonomy term archives, one fragment per taxonomy."""

from __future__ import annotations

from typing import List, Sequence

from critical_cache.models.content import Post
from critical_cache.models.context import ContentKind, RequestContext
from critical_cache.services.content_source import ContentSource

from .interface import SourceGroups, key_group, owns_prefixed_key, storage_key


class TaxonomyProvider:
    name = "taxonomy"

    def __init__(self, content: ContentSource, sample_size: int = 10) -> None:
        self._content = content
        self._sample_size = sample_size

    def owns_key(self, key: str) -> bool:
        return owns_prefixed_key(self.name, key)

    def current_storage_keys(self, context: RequestContext) -> List[str]:
        if context.kind != ContentKind.taxonomy or not context.taxonomy:
            return []
        return [storage_key(self.name, context.taxonomy)]

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups:
        groups: SourceGroups = {}
        for taxonomy in self._content.public_taxonomies():
            links = [term.link for term in self._content.terms(taxonomy, self._sample_size)]
            if links:
                groups[taxonomy] = links
        return groups

    def describe_key(self, key: str) -> str:
        return f"Taxonomy: {key_group(self.name, key)}"

    def success_ratio(self) -> float:
        return 0.5
