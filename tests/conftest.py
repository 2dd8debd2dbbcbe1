import pytest

from critical_cache.models.content import Post, PostType, SiteSnapshot, Term
from critical_cache.providers import default_providers
from critical_cache.services.content_source import StaticContentSource
from critical_cache.services.critical_css import CriticalCSSService
from critical_cache.services.critical_css_store import CriticalCSSStore
from critical_cache.services.kv_store import InMemoryKeyValueStore
from critical_cache.services.page_cache_invalidator import PageCacheInvalidator
from critical_cache.services.page_cache_store import InMemoryPageCache
from critical_cache.services.provider_registry import ProviderRegistry

SITE_URL = "https://example.com"
HOME_URL = "https://example.com/"


@pytest.fixture
def snapshot():
    """A site with a static front page, a posts page, one cornerstone page and two taxonomies."""
    return SiteSnapshot(
        show_on_front="page",
        page_on_front=2,
        page_for_posts=3,
        cornerstone_pages=["/a"],
        post_types=[
            PostType(name="post", label="Posts"),
            PostType(name="page", label="Pages"),
            PostType(name="product", label="Products", has_archive=True, archive_url=f"{SITE_URL}/products/"),
        ],
        posts=[
            Post(id=1, post_type="post", permalink=f"{SITE_URL}/hello/", title="Hello", published_at="2024-01-01"),
            Post(id=42, post_type="post", permalink=f"{SITE_URL}/answer/", title="Answer", published_at="2024-02-01"),
            Post(id=2, post_type="page", permalink=HOME_URL, title="Home"),
            Post(id=3, post_type="page", permalink=f"{SITE_URL}/blog/", title="Blog"),
            Post(id=5, post_type="page", permalink=f"{SITE_URL}/a", title="Cornerstone"),
            Post(id=7, post_type="product", permalink=f"{SITE_URL}/product/widget/", title="Widget"),
        ],
        taxonomies=["category", "post_tag"],
        terms=[
            Term(taxonomy="category", slug="news", link="/a", count=5),
            Term(taxonomy="category", slug="tech", link="/b", count=3),
        ],
    )


@pytest.fixture
def content(snapshot):
    return StaticContentSource(snapshot, SITE_URL)


@pytest.fixture
def registry(content):
    return ProviderRegistry(default_providers(content, sample_size=10))


@pytest.fixture
def kv_backend():
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv_backend):
    return CriticalCSSStore(kv_backend, ttl_seconds=3600, key_prefix="critical_css:")


@pytest.fixture
def service(registry, store, content):
    return CriticalCSSService(registry, store, content)


@pytest.fixture
def page_cache():
    return InMemoryPageCache()


@pytest.fixture
def invalidator(page_cache, content):
    return PageCacheInvalidator(page_cache, content)
