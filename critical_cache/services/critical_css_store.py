"""Fragment lookups over a key-value backend."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from pydantic import ValidationError

from critical_cache.core.exceptions import BackingStoreUnavailable
from critical_cache.core.logging import get_logger
from critical_cache.models.critical_css import FragmentRecord

from .kv_store import KeyValueStore

logger = get_logger(__name__)


class CriticalCSSStore:
    """Reads and writes fragment records keyed by storage key.

    A backend failure never propagates out of a read: the page renders
    without critical CSS instead.
    """

    def __init__(self, backend: KeyValueStore, ttl_seconds: Optional[int] = None, key_prefix: str = "") -> None:
        self._backend = backend
        self._ttl_seconds = ttl_seconds
        self._key_prefix = key_prefix

    def get(self, ordered_keys: Sequence[str]) -> Optional[FragmentRecord]:
        """Return the fragment for the first key present, or ``None`` when none is stored."""

        for key in ordered_keys:
            record = self._read(key)
            if record is not None:
                return record
        return None

    def set(self, key: str, css: str) -> FragmentRecord:
        record = FragmentRecord(key=key, css=css)
        self._backend.set(self._backend_key(key), record.model_dump_json().encode("utf-8"), ttl=self._ttl_seconds)
        logger.info("critical_css_fragment_stored", key=key, bytes=len(css))
        return record

    def delete(self, key: str) -> bool:
        """Remove a fragment. Returns False when nothing was stored under ``key``."""

        deleted = self._backend.delete(self._backend_key(key))
        if deleted:
            logger.info("critical_css_fragment_deleted", key=key)
        return deleted

    def delete_many(self, keys: Iterable[str]) -> int:
        return sum(1 for key in keys if self.delete(key))

    def _read(self, key: str) -> Optional[FragmentRecord]:
        try:
            raw = self._backend.get(self._backend_key(key))
        except BackingStoreUnavailable as exc:
            logger.warning("critical_css_store_unavailable", key=key, error=str(exc))
            return None

        if raw is None:
            return None

        try:
            return FragmentRecord.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("critical_css_fragment_corrupt", key=key, error=str(exc))
            return None

    def _backend_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"
