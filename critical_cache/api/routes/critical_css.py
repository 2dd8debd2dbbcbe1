"""Routes for critical CSS lookup, source resolution and fragment storage."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from critical_cache.api.dependencies import require_api_token
from critical_cache.core.exceptions import BackingStoreUnavailable, NotFound, UnknownStorageKey
from critical_cache.core.logging import bound_log_context, get_logger
from critical_cache.models.context import RequestContext, RequestScope
from critical_cache.models.critical_css import (
    CriticalCSSLookupResponse,
    FragmentRecord,
    FragmentWriteRequest,
    InvalidateUrlRequest,
    InvalidateUrlResponse,
    KeyOwnerResponse,
    SourceRecord,
    SourcesRequest,
)
from critical_cache.services.critical_css import CriticalCSSService, get_critical_css_service
from critical_cache.tasks.page_cache_tasks import page_output_changed

logger = get_logger(__name__)

router = APIRouter(prefix="/critical-css", tags=["critical-css"], dependencies=[Depends(require_api_token)])


@router.post("/lookup", response_model=CriticalCSSLookupResponse, summary="Find the fragment for a page view")
def lookup_critical_css(
    context: RequestContext,
    service: CriticalCSSService = Depends(get_critical_css_service),
) -> CriticalCSSLookupResponse:
    """Resolve the candidate keys for a request and return the first stored fragment."""

    scope = RequestScope(context=context)
    with bound_log_context(url=context.url, kind=context.kind.value):
        css = service.get_current_request_css(scope)
        return CriticalCSSLookupResponse(
            keys=service.current_request_keys(scope),
            key=service.get_current_critical_css_key(scope),
            css=css,
            found=css is not None,
        )


@router.post("/sources", response_model=List[SourceRecord], summary="List URLs to sample per storage key")
def resolve_sources(
    payload: SourcesRequest,
    service: CriticalCSSService = Depends(get_critical_css_service),
) -> List[SourceRecord]:
    """Return the source records the generation pipeline should process, in order."""

    return service.resolve_sources(payload.context_post_ids)


@router.get("/owner/{key}", response_model=KeyOwnerResponse, summary="Find the provider owning a key")
def get_key_owner(key: str, service: CriticalCSSService = Depends(get_critical_css_service)) -> KeyOwnerResponse:
    provider = service.resolve_owner(key)
    if provider is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No provider owns this key")
    return KeyOwnerResponse(key=key, provider=provider.name, label=provider.describe_key(key))


@router.get("/fragments/{key}", response_model=FragmentRecord, summary="Read a stored fragment")
def get_fragment(key: str, service: CriticalCSSService = Depends(get_critical_css_service)) -> FragmentRecord:
    try:
        return service.get_fragment(key)
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put("/fragments/{key}", response_model=FragmentRecord, summary="Store a generated fragment")
def put_fragment(
    key: str,
    payload: FragmentWriteRequest,
    service: CriticalCSSService = Depends(get_critical_css_service),
) -> FragmentRecord:
    """Persist a fragment produced by the generation pipeline and refresh cached pages."""

    try:
        record = service.save_fragment(key, payload.css)
    except UnknownStorageKey as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except BackingStoreUnavailable as exc:
        logger.error("critical_css_fragment_write_failed", key=key, error=str(exc))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Fragment store unavailable") from exc

    page_output_changed.delay()
    return record


@router.delete("/fragments/{key}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a fragment")
def delete_fragment(key: str, service: CriticalCSSService = Depends(get_critical_css_service)) -> Response:
    try:
        service.delete_fragment(key)
    except BackingStoreUnavailable as exc:
        logger.error("critical_css_fragment_delete_failed", key=key, error=str(exc))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Fragment store unavailable") from exc

    page_output_changed.delay()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/invalidate", response_model=InvalidateUrlResponse, summary="Drop fragments sampled from a URL")
def invalidate_url(
    payload: InvalidateUrlRequest,
    service: CriticalCSSService = Depends(get_critical_css_service),
) -> InvalidateUrlResponse:
    """Delete the fragments whose sources include an edited URL so they get regenerated."""

    try:
        deleted = service.invalidate_url(payload.url)
    except BackingStoreUnavailable as exc:
        logger.error("critical_css_invalidate_failed", url=payload.url, error=str(exc))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Fragment store unavailable") from exc

    if deleted:
        page_output_changed.delay()
    return InvalidateUrlResponse(url=payload.url, deleted_keys=deleted)
