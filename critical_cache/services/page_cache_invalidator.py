"""Translate content-change events into page cache deletes."""

from __future__ import annotations

from critical_cache.core.exceptions import BackingStoreUnavailable
from critical_cache.core.logging import get_logger
from critical_cache.core.urls import make_absolute_url

from .content_source import ContentSource
from .page_cache_store import PageCacheStore

logger = get_logger(__name__)


class PageCacheInvalidator:
    """Stateless purge operations over a :class:`PageCacheStore`.

    Every operation is idempotent and returns the number of entries removed.
    Store failures are logged with the event and target and reported as zero
    deletions; the next content-change event retries naturally.
    """

    def __init__(self, store: PageCacheStore, content: ContentSource) -> None:
        self._store = store
        self._content = content

    def purge_all(self) -> int:
        home_url = self._content.home_url()
        deleted = self._guarded("all", home_url, lambda: self._store.delete_recursive(home_url))
        logger.info("page_cache_purged_all", deleted=deleted)
        return deleted

    def purge_home(self) -> int:
        home_url = self._content.home_url()
        deleted = self._guarded("home", home_url, lambda: self._store.delete_page(home_url))
        logger.debug("page_cache_front_page_purged", url=home_url, deleted=deleted)

        if self._content.show_on_front() == "page":
            posts_page_id = self._content.page_for_posts()
            posts_url = self._content.get_permalink(posts_page_id) if posts_page_id else None
            if posts_url:
                deleted += self._guarded("home", posts_url, lambda: self._store.delete_recursive(posts_url))
                logger.debug("page_cache_posts_page_purged", url=posts_url)

        return deleted

    def purge_url(self, url: str) -> int:
        absolute = make_absolute_url(url, self._content.home_url())
        deleted = self._guarded("url", absolute, lambda: self._store.delete_recursive(absolute))
        logger.info("page_cache_url_purged", url=absolute, deleted=deleted)
        return deleted

    def purge_post(self, post_id: int) -> int:
        permalink = self._content.get_permalink(post_id)
        if not permalink:
            logger.info("page_cache_post_not_found", post_id=post_id)
            return 0

        logger.debug("page_cache_invalidate_post", post_id=post_id, url=permalink)
        return self.purge_url(permalink)

    def _guarded(self, event: str, target: str, operation) -> int:
        try:
            return operation()
        except BackingStoreUnavailable as exc:
            logger.error("page_cache_purge_failed", event=event, target=target, error=str(exc))
            return 0
