"""API router aggregator."""

from fastapi import APIRouter

from critical_cache.api.routes import critical_css, page_cache

api_router = APIRouter()
api_router.include_router(critical_css.router)
api_router.include_router(page_cache.router)
