"""Provider for post type archive pages."""

from __future__ import annotations

from typing import List, Sequence

from critical_cache.models.content import Post
from critical_cache.models.context import ContentKind, RequestContext
from critical_cache.services.content_source import ContentSource

from .interface import SourceGroups, key_group, owns_prefixed_key, storage_key


class ArchiveProvider:
    name = "archive"

    def __init__(self, content: ContentSource) -> None:
        self._content = content

    def owns_key(self, key: str) -> bool:
        return owns_prefixed_key(self.name, key)

    def current_storage_keys(self, context: RequestContext) -> List[str]:
        if context.kind != ContentKind.archive or not context.archive_post_type:
            return []
        return [storage_key(self.name, context.archive_post_type)]

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups:
        groups: SourceGroups = {}
        for post_type in self._content.public_post_types():
            link = self._content.post_type_archive_link(post_type.name)
            if link:
                groups[post_type.name] = [link]
        return groups

    def describe_key(self, key: str) -> str:
        return f"Archive: {key_group(self.name, key)}"

    def success_ratio(self) -> float:
        return 1.0
