"""Content lookups consumed by providers and the page cache invalidator."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

from critical_cache.core.config import settings
from critical_cache.core.logging import get_logger
from critical_cache.models.content import Post, PostType, SiteSnapshot, Term

logger = get_logger(__name__)


@runtime_checkable
class ContentSource(Protocol):
    """Read-only view of the host's content model."""

    def home_url(self) -> str: ...

    def show_on_front(self) -> str: ...

    def page_for_posts(self) -> Optional[int]: ...

    def get_post(self, post_id: int) -> Optional[Post]: ...

    def get_permalink(self, post_id: int) -> Optional[str]: ...

    def cornerstone_pages(self) -> List[str]: ...

    def public_post_types(self) -> List[PostType]: ...

    def recent_posts(self, post_type: str, limit: int) -> List[Post]: ...

    def post_type_archive_link(self, post_type: str) -> Optional[str]: ...

    def public_taxonomies(self) -> List[str]: ...

    def terms(self, taxonomy: str, limit: int) -> List[Term]: ...


class StaticContentSource:
    """Content source backed by an in-memory :class:`SiteSnapshot`."""

    def __init__(self, snapshot: SiteSnapshot, site_url: str) -> None:
        self._snapshot = snapshot
        self._site_url = (snapshot.site_url or site_url).rstrip("/")
        self._posts = snapshot.posts_by_id()

    @classmethod
    def from_file(cls, path: str | Path, site_url: str) -> "StaticContentSource":
        """Load a snapshot serialized as JSON."""

        snapshot = SiteSnapshot.model_validate_json(Path(path).read_text(encoding="utf-8"))
        logger.info("content_snapshot_loaded", path=str(path), posts=len(snapshot.posts), terms=len(snapshot.terms))
        return cls(snapshot, site_url)

    def home_url(self) -> str:
        return f"{self._site_url}/"

    def show_on_front(self) -> str:
        return self._snapshot.show_on_front

    def page_for_posts(self) -> Optional[int]:
        return self._snapshot.page_for_posts

    def get_post(self, post_id: int) -> Optional[Post]:
        return self._posts.get(post_id)

    def get_permalink(self, post_id: int) -> Optional[str]:
        post = self._posts.get(post_id)
        if post is None:
            return None
        return post.permalink or f"{self.home_url()}?p={post.id}"

    def cornerstone_pages(self) -> List[str]:
        return list(self._snapshot.cornerstone_pages)

    def public_post_types(self) -> List[PostType]:
        return list(self._snapshot.post_types)

    def recent_posts(self, post_type: str, limit: int) -> List[Post]:
        posts = [post for post in self._snapshot.posts if post.post_type == post_type]
        posts.sort(key=lambda post: (post.published_at or "", post.id), reverse=True)
        return posts[:limit]

    def post_type_archive_link(self, post_type: str) -> Optional[str]:
        for candidate in self._snapshot.post_types:
            if candidate.name == post_type and candidate.has_archive:
                return candidate.archive_url or f"{self.home_url()}{post_type}/"
        return None

    def public_taxonomies(self) -> List[str]:
        return list(self._snapshot.taxonomies)

    def terms(self, taxonomy: str, limit: int) -> List[Term]:
        terms = [term for term in self._snapshot.terms if term.taxonomy == taxonomy]
        terms.sort(key=lambda term: term.count, reverse=True)
        return terms[:limit]


@lru_cache
def get_content_source() -> ContentSource:
    """Return the configured content source."""

    if settings.content_snapshot_path:
        return StaticContentSource.from_file(settings.content_snapshot_path, settings.site_url)
    return StaticContentSource(SiteSnapshot(), settings.site_url)
