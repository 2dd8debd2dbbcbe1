"""Exceptions shared by the resolution, storage and invalidation layers."""


class CriticalCacheError(Exception):
    """Base exception for the package."""


class NotFound(CriticalCacheError):
    """A key, post or URL is absent. Expected during normal operation."""


class BackingStoreUnavailable(CriticalCacheError):
    """Reading from or writing to a backing store failed."""


class InvalidContext(CriticalCacheError):
    """A request context cannot be mapped to any provider."""


class UnknownStorageKey(CriticalCacheError):
    """A storage key is not owned by any registered provider."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No provider owns storage key '{key}'")
        self.key = key
