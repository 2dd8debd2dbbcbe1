"""Provider sharing one fragment across every post of a content type."""

from __future__ import annotations

from typing import Dict, List, Sequence

from critical_cache.core.exceptions import InvalidContext
from critical_cache.models.content import Post
from critical_cache.models.context import ContentKind, RequestContext
from critical_cache.services.content_source import ContentSource

from .interface import SourceGroups, key_group, owns_prefixed_key, storage_key


class SingularPostProvider:
    name = "singular"

    def __init__(self, content: ContentSource, sample_size: int = 10) -> None:
        self._content = content
        self._sample_size = sample_size

    def owns_key(self, key: str) -> bool:
        return owns_prefixed_key(self.name, key)

    def current_storage_keys(self, context: RequestContext) -> List[str]:
        if context.kind != ContentKind.singular:
            return []

        post_type = context.post_type
        if post_type is None and context.post_id is not None:
            post = self._content.get_post(context.post_id)
            post_type = post.post_type if post else None
        if post_type is None:
            raise InvalidContext(f"Cannot determine the post type of {context.url}")

        return [storage_key(self.name, post_type)]

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups:
        groups: SourceGroups = {}
        for post_type in self._content.public_post_types():
            sampled: Dict[str, None] = {}
            candidates = [post for post in context_posts if post.post_type == post_type.name]
            candidates += self._content.recent_posts(post_type.name, self._sample_size)
            for post in candidates:
                if len(sampled) >= self._sample_size:
                    break
                permalink = self._content.get_permalink(post.id)
                if permalink:
                    sampled.setdefault(permalink, None)
            if sampled:
                groups[post_type.name] = list(sampled)
        return groups

    def describe_key(self, key: str) -> str:
        post_type = key_group(self.name, key)
        for candidate in self._content.public_post_types():
            if candidate.name == post_type and candidate.label:
                return f"Single {candidate.label}"
        return f"Single {post_type}"

    def success_ratio(self) -> float:
        return 0.5
