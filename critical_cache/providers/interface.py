"""Capability interface shared by every critical CSS provider."""

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence, runtime_checkable

from critical_cache.models.content import Post
from critical_cache.models.context import RequestContext

SourceGroups = Dict[str, List[str]]


@runtime_checkable
class Provider(Protocol):
    """One strategy for deriving storage keys and source URLs.

    Keys are namespaced as ``<name>_<group>``; a provider owns exactly the
    keys carrying its prefix.
    """

    name: str

    def owns_key(self, key: str) -> bool: ...

    def current_storage_keys(self, context: RequestContext) -> List[str]: ...

    def critical_source_urls(self, context_posts: Sequence[Post]) -> SourceGroups: ...

    def describe_key(self, key: str) -> str: ...

    def success_ratio(self) -> float: ...


def storage_key(provider_name: str, group: str) -> str:
    return f"{provider_name}_{group}"


def owns_prefixed_key(provider_name: str, key: str) -> bool:
    return key.startswith(f"{provider_name}_")


def key_group(provider_name: str, key: str) -> str:
    """Strip the provider namespace from a key it owns."""

    return key[len(provider_name) + 1 :]
