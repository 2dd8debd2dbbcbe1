"""Provider for fragments dedicated to a single post."""

from __future__ import annotations

from typing import List, Sequence

from critical_cache.models.content import Post
from critical_cache.models.context import ContentKind, RequestContext
from critical_cache.services.content_source import ContentSource

from .interface import SourceGroups, key_group, owns_prefixed_key, storage_key


class PostIDProvider:
    name = "post_id"

    def __init__(self, content: ContentSource) -> None:
        self._content = content

    def owns_key(self, key: str) -> bool:
        return owns_prefixed_key(self.name, key)

    def current_storage_keys(self, context: RequestContext) -> List[str]:
        if context.kind != ContentKind.singular or context.post_id is None:
            return []
        return [storage_key(self.name, str(context.post_id))]

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups:
        groups: SourceGroups = {}
        for post in context_posts:
            permalink = self._content.get_permalink(post.id)
            if permalink:
                groups[str(post.id)] = [permalink]
        return groups

    def describe_key(self, key: str) -> str:
        group = key_group(self.name, key)
        post = self._content.get_post(int(group)) if group.isdigit() else None
        if post is not None and post.title:
            return f"Post: {post.title}"
        return f"Post {group}"

    def success_ratio(self) -> float:
        return 1.0
