"""Request context models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .critical_css import FragmentRecord


class ContentKind(str, Enum):
    """Resolved content identity of a page view."""

    front_page = "front_page"
    posts_page = "posts_page"
    singular = "singular"
    archive = "archive"
    taxonomy = "taxonomy"
    other = "other"


class RequestContext(BaseModel):
    """What the host resolved the current request to."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Requested URL, absolute or site-relative.")
    kind: ContentKind = ContentKind.other
    post_id: Optional[int] = None
    post_type: Optional[str] = None
    taxonomy: Optional[str] = None
    term: Optional[str] = None
    archive_post_type: Optional[str] = None


@dataclass
class RequestScope:
    """Per-request state passed through the resolution chain.

    Holds the memoized storage keys and fragment lookup so that repeated
    calls during one request hit the providers and the backing store once.
    """

    context: RequestContext
    keys: Optional[List[str]] = None
    lookup_done: bool = False
    fragment: Optional[FragmentRecord] = field(default=None)
