"""Models for critical CSS lookup and source resolution."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FragmentRecord(BaseModel):
    """A stored critical CSS fragment. An empty ``css`` is a valid value."""

    model_config = ConfigDict(frozen=True)

    key: str
    css: str


class SourceRecord(BaseModel):
    """One provider group and the URLs sampled to generate its fragment."""

    key: str
    label: str
    urls: List[str]
    success_ratio: float = Field(..., ge=0.0, le=1.0)


class SourcesRequest(BaseModel):
    """Payload accepted by the source resolution endpoint."""

    context_post_ids: List[int] = Field(default_factory=list, description="Posts that must be represented.")


class FragmentWriteRequest(BaseModel):
    """Payload written by the generation pipeline for one storage key."""

    css: str


class CriticalCSSLookupResponse(BaseModel):
    """API response describing which fragment applies to a request."""

    keys: List[str]
    key: Optional[str] = None
    css: Optional[str] = None
    found: bool = False


class KeyOwnerResponse(BaseModel):
    """API response naming the provider that owns a key."""

    key: str
    provider: str
    label: str


class InvalidateUrlRequest(BaseModel):
    """Payload naming a URL whose content changed."""

    url: str = Field(..., description="Absolute or site-relative URL that was edited.")


class InvalidateUrlResponse(BaseModel):
    """Fragments dropped because they were generated from the URL."""

    url: str
    deleted_keys: List[str]
