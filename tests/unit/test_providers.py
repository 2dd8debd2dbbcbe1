import pytest

from critical_cache.core.exceptions import InvalidContext
from critical_cache.core.urls import url_hash
from critical_cache.models.content import SiteSnapshot
from critical_cache.models.context import ContentKind, RequestContext
from critical_cache.providers import (
    ArchiveProvider,
    CoreProvider,
    CornerstoneProvider,
    PostIDProvider,
    Provider,
    SingularPostProvider,
    TaxonomyProvider,
    default_providers,
)
from critical_cache.services.content_source import StaticContentSource

CORNERSTONE_KEY = f"cornerstone_{url_hash('https://example.com/a')}"


def test_default_providers_order(content):
    names = [provider.name for provider in default_providers(content)]
    assert names == ["cornerstone", "post_id", "core", "singular", "archive", "taxonomy"]


def test_providers_satisfy_interface(content):
    for provider in default_providers(content):
        assert isinstance(provider, Provider)


class TestCoreProvider:
    def test_front_and_posts_page_keys(self, content):
        provider = CoreProvider(content)
        assert provider.current_storage_keys(RequestContext(url="/", kind=ContentKind.front_page)) == [
            "core_front_page"
        ]
        assert provider.current_storage_keys(RequestContext(url="/blog/", kind=ContentKind.posts_page)) == [
            "core_posts_page"
        ]
        assert provider.current_storage_keys(RequestContext(url="/hello/", kind=ContentKind.singular)) == []

    def test_sources_include_posts_page_with_static_front(self, content):
        assert CoreProvider(content).critical_source_urls([]) == {
            "front_page": ["https://example.com/"],
            "posts_page": ["https://example.com/blog/"],
        }

    def test_sources_without_static_front(self):
        content = StaticContentSource(SiteSnapshot(page_for_posts=3), "https://example.com")
        assert CoreProvider(content).critical_source_urls([]) == {"front_page": ["https://example.com/"]}

    def test_describe_key(self, content):
        provider = CoreProvider(content)
        assert provider.describe_key("core_front_page") == "Front page"
        assert provider.describe_key("core_posts_page") == "Posts page"


class TestCornerstoneProvider:
    @pytest.mark.parametrize("url", ["/a", "https://example.com/a", "https://example.com/a/"])
    def test_matches_cornerstone_url(self, content, url):
        context = RequestContext(url=url, kind=ContentKind.singular, post_id=5)
        assert CornerstoneProvider(content).current_storage_keys(context) == [CORNERSTONE_KEY]

    def test_ignores_other_urls(self, content):
        context = RequestContext(url="/ab", kind=ContentKind.singular)
        assert CornerstoneProvider(content).current_storage_keys(context) == []

    def test_sources_and_label(self, content):
        provider = CornerstoneProvider(content)
        assert provider.critical_source_urls([]) == {url_hash("https://example.com/a"): ["/a"]}
        assert provider.describe_key(CORNERSTONE_KEY) == "Cornerstone page: /a"
        assert provider.describe_key("cornerstone_unknown") == "Cornerstone page"


class TestPostIDProvider:
    def test_singular_key(self, content):
        context = RequestContext(url="/answer/", kind=ContentKind.singular, post_id=42)
        assert PostIDProvider(content).current_storage_keys(context) == ["post_id_42"]

    def test_no_key_without_post_id(self, content):
        context = RequestContext(url="/answer/", kind=ContentKind.singular)
        assert PostIDProvider(content).current_storage_keys(context) == []

    def test_sources_come_from_context_posts(self, content, snapshot):
        posts = [snapshot.posts_by_id()[42]]
        assert PostIDProvider(content).critical_source_urls(posts) == {"42": ["https://example.com/answer/"]}
        assert PostIDProvider(content).critical_source_urls([]) == {}

    def test_describe_key_uses_title(self, content):
        provider = PostIDProvider(content)
        assert provider.describe_key("post_id_42") == "Post: Answer"
        assert provider.describe_key("post_id_999") == "Post 999"


class TestSingularPostProvider:
    def test_key_from_post_type(self, content):
        context = RequestContext(url="/answer/", kind=ContentKind.singular, post_id=42, post_type="post")
        assert SingularPostProvider(content).current_storage_keys(context) == ["singular_post"]

    def test_key_from_post_lookup(self, content):
        context = RequestContext(url="/product/widget/", kind=ContentKind.singular, post_id=7)
        assert SingularPostProvider(content).current_storage_keys(context) == ["singular_product"]

    def test_unknown_post_raises_invalid_context(self, content):
        context = RequestContext(url="/gone/", kind=ContentKind.singular, post_id=999)
        with pytest.raises(InvalidContext):
            SingularPostProvider(content).current_storage_keys(context)

    def test_sources_sample_recent_posts_newest_first(self, content):
        groups = SingularPostProvider(content).critical_source_urls([])
        assert groups["post"] == ["https://example.com/answer/", "https://example.com/hello/"]
        assert groups["product"] == ["https://example.com/product/widget/"]

    def test_context_posts_come_first_and_sample_is_bounded(self, content, snapshot):
        hello = snapshot.posts_by_id()[1]
        groups = SingularPostProvider(content, sample_size=1).critical_source_urls([hello])
        assert groups["post"] == ["https://example.com/hello/"]

    def test_describe_key_uses_label(self, content):
        assert SingularPostProvider(content).describe_key("singular_product") == "Single Products"


class TestArchiveProvider:
    def test_key_and_sources(self, content):
        provider = ArchiveProvider(content)
        context = RequestContext(url="/products/", kind=ContentKind.archive, archive_post_type="product")
        assert provider.current_storage_keys(context) == ["archive_product"]
        assert provider.critical_source_urls([]) == {"product": ["https://example.com/products/"]}
        assert provider.describe_key("archive_product") == "Archive: product"


class TestTaxonomyProvider:
    def test_key_and_sources(self, content):
        provider = TaxonomyProvider(content)
        context = RequestContext(url="/b", kind=ContentKind.taxonomy, taxonomy="category", term="tech")
        assert provider.current_storage_keys(context) == ["taxonomy_category"]
        assert provider.critical_source_urls([]) == {"category": ["/a", "/b"]}
        assert provider.describe_key("taxonomy_post_tag") == "Taxonomy: post_tag"
        assert provider.success_ratio() == 0.5

    def test_owns_only_its_prefix(self, content):
        provider = TaxonomyProvider(content)
        assert provider.owns_key("taxonomy_category")
        assert not provider.owns_key("taxonomycategory")
        assert not provider.owns_key("singular_post")
