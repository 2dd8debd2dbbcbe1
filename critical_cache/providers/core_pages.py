"""Provider for the site's structural pages: the front page and the posts index."""

from __future__ import annotations

from typing import List, Sequence

from critical_cache.models.content import Post
from critical_cache.models.context import ContentKind, RequestContext
from critical_cache.services.content_source import ContentSource

from .interface import SourceGroups, key_group, owns_prefixed_key, storage_key

FRONT_PAGE = "front_page"
POSTS_PAGE = "posts_page"


class CoreProvider:
    name = "core"

    def __init__(self, content: ContentSource) -> None:
        self._content = content

    def owns_key(self, key: str) -> bool:
        return owns_prefixed_key(self.name, key)

    def current_storage_keys(self, context: RequestContext) -> List[str]:
        if context.kind == ContentKind.front_page:
            return [storage_key(self.name, FRONT_PAGE)]
        if context.kind == ContentKind.posts_page:
            return [storage_key(self.name, POSTS_PAGE)]
        return []

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups:
        groups: SourceGroups = {FRONT_PAGE: [self._content.home_url()]}

        # A separate posts index only exists when the front page is a static page.
        if self._content.show_on_front() == "page":
            posts_page_id = self._content.page_for_posts()
            permalink = self._content.get_permalink(posts_page_id) if posts_page_id else None
            if permalink:
                groups[POSTS_PAGE] = [permalink]

        return groups

    def describe_key(self, key: str) -> str:
        if key_group(self.name, key) == POSTS_PAGE:
            return "Posts page"
        return "Front page"

    def success_ratio(self) -> float:
        return 1.0
