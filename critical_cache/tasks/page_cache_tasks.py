"""Celery tasks dispatching page cache invalidation events."""

from __future__ import annotations

from critical_cache.core.logging import get_logger
from critical_cache.services.events import get_cache_events
from critical_cache.worker.celery_app import celery_app

logger = get_logger(__name__)


@celery_app.task(name="page_cache.purge_all")
def purge_all() -> int:
    """Purge every cached page of the site."""

    return get_cache_events().on_content_changed_everywhere()


@celery_app.task(name="page_cache.purge_home")
def purge_home() -> int:
    """Purge the front page and, with a static front page, the posts index."""

    return get_cache_events().on_home_changed()


@celery_app.task(name="page_cache.purge_url")
def purge_url(url: str) -> int:
    """Purge a URL and its derived variants."""

    return get_cache_events().on_url_changed(url)


@celery_app.task(name="page_cache.purge_post")
def purge_post(post_id: int) -> int:
    """Purge the cached pages of a post."""

    logger.info("purge_post_task_started", post_id=post_id)
    return get_cache_events().on_post_changed(post_id)


@celery_app.task(name="page_cache.output_changed")
def page_output_changed() -> int:
    """Purge everything after a critical CSS fragment changed."""

    return get_cache_events().on_page_output_changed()
