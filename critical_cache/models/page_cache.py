"""Models for page cache invalidation requests."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PurgeEvent(str, Enum):
    """Content-change events understood by the invalidator."""

    all = "all"
    home = "home"
    url = "url"
    post = "post"


class PurgeUrlRequest(BaseModel):
    """Payload for URL purges."""

    url: str = Field(..., description="Absolute or site-relative URL to purge with its variants.")


class PurgeAcceptedResponse(BaseModel):
    """Acknowledgement for a dispatched purge."""

    event: PurgeEvent
    target: Optional[str] = None
    task_id: Optional[str] = None
