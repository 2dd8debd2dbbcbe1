"""Critical CSS providers and their resolution order."""

from typing import Tuple

from critical_cache.services.content_source import ContentSource

from .archive import ArchiveProvider
from .core_pages import CoreProvider
from .cornerstone import CornerstoneProvider
from .interface import Provider
from .post_id import PostIDProvider
from .singular import SingularPostProvider
from .taxonomy import TaxonomyProvider

# Providers whose URLs are reserved: no other provider may claim them.
STRUCTURAL_PROVIDERS = (CoreProvider.name, CornerstoneProvider.name)


def default_providers(content: ContentSource, sample_size: int = 10) -> Tuple[Provider, ...]:
    """Build the provider chain, most specific first.

    Lookups stop at the first stored fragment, so a post's own fragment is
    tried before the one shared by its post type.
    """

    return (
        CornerstoneProvider(content),
        PostIDProvider(content),
        CoreProvider(content),
        SingularPostProvider(content, sample_size=sample_size),
        ArchiveProvider(content),
        TaxonomyProvider(content, sample_size=sample_size),
    )


__all__ = [
    "ArchiveProvider",
    "CoreProvider",
    "CornerstoneProvider",
    "PostIDProvider",
    "Provider",
    "STRUCTURAL_PROVIDERS",
    "SingularPostProvider",
    "TaxonomyProvider",
    "default_providers",
]
