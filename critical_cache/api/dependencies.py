"""Request guards shared by the routers."""

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from critical_cache.core.config import settings
from critical_cache.core.logging import get_logger

logger = get_logger(__name__)

api_token_header = APIKeyHeader(name=settings.auth_token_header, auto_error=False)


def _strip_bearer(token: str) -> str:
    scheme, _, value = token.partition(" ")
    if value and scheme.lower() == "bearer":
        return value.strip()
    return token.strip()


def require_api_token(token: str | None = Security(api_token_header)) -> str:
    """Reject callers that do not present the shared token.

    Purges and fragment writes are only triggered by the host site and the
    generation pipeline, which both hold the token. An empty secret disables
    the check.
    """

    expected = settings.auth_jwt_secret
    if not expected:
        return ""

    if token and _strip_bearer(token) == expected:
        return expected

    logger.warning("api_token_rejected", header=settings.auth_token_header, present=bool(token))
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API token")
