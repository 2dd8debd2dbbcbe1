"""Routes firing page cache invalidation events."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from critical_cache.api.dependencies import require_api_token
from critical_cache.models.page_cache import PurgeAcceptedResponse, PurgeEvent, PurgeUrlRequest
from critical_cache.tasks import page_cache_tasks

router = APIRouter(prefix="/page-cache", tags=["page-cache"], dependencies=[Depends(require_api_token)])


@router.post(
    "/purge/all",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=PurgeAcceptedResponse,
    summary="Purge every cached page",
)
def purge_all() -> PurgeAcceptedResponse:
    result = page_cache_tasks.purge_all.delay()
    return PurgeAcceptedResponse(event=PurgeEvent.all, task_id=result.id)


@router.post(
    "/purge/home",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=PurgeAcceptedResponse,
    summary="Purge the front page and posts index",
)
def purge_home() -> PurgeAcceptedResponse:
    result = page_cache_tasks.purge_home.delay()
    return PurgeAcceptedResponse(event=PurgeEvent.home, task_id=result.id)


@router.post(
    "/purge/url",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=PurgeAcceptedResponse,
    summary="Purge a URL and its paginated variants",
)
def purge_url(payload: PurgeUrlRequest) -> PurgeAcceptedResponse:
    result = page_cache_tasks.purge_url.delay(payload.url)
    return PurgeAcceptedResponse(event=PurgeEvent.url, target=payload.url, task_id=result.id)


@router.post(
    "/purge/post/{post_id}",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=PurgeAcceptedResponse,
    summary="Purge the cached pages of a post",
)
def purge_post(post_id: int) -> PurgeAcceptedResponse:
    result = page_cache_tasks.purge_post.delay(post_id)
    return PurgeAcceptedResponse(event=PurgeEvent.post, target=str(post_id), task_id=result.id)
